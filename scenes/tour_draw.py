"""
scenes/tour_draw.py — Drawing helpers for the tour preview.

Pure functions of (surface, app, scene).  World units map to pixels
through ``scene.scale`` with the tour camera at the screen centre.
"""

from __future__ import annotations
import pygame

from core.app import App


ROOM_COLOR = (60, 70, 80)
ROOM_REALIZED = (80, 110, 90)
ROOM_CURRENT = (120, 160, 110)
GATE_COLOR = (140, 90, 60)
LINK_COLOR = (45, 50, 60)
ANCHOR_COLOR = (230, 210, 120)
TARGET_COLOR = (255, 120, 80)


def format_time(seconds: float | None) -> str:
    """``m:ss`` for the HUD; ``--:--`` when there is nothing to show."""
    if seconds is None:
        return "--:--"
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def world_to_screen(scene, surface: pygame.Surface, x: float, y: float
                    ) -> tuple[int, int]:
    sw, sh = surface.get_size()
    cx, cy = scene.world.camera_position()
    return (int(sw / 2 + (x - cx) * scene.scale),
            int(sh / 2 + (y - cy) * scene.scale))


# ── Rooms ──────────────────────────────────────────────────────────

def draw_rooms(surface: pygame.Surface, scene) -> None:
    world = scene.world
    rooms = {r.name: r for r in world.list_rooms(world.region)}
    current = scene.controller.current_room
    k = scene.scale

    # Links first so rooms draw over them.
    for room in rooms.values():
        a = world_to_screen(scene, surface, *room.center)
        for name in room.connections:
            other = rooms.get(name)
            if other is not None and name > room.name:
                b = world_to_screen(scene, surface, *other.center)
                pygame.draw.line(surface, LINK_COLOR, a, b, 2)

    for room in rooms.values():
        x, y = world_to_screen(scene, surface, *room.origin)
        rect = pygame.Rect(x, y, int(room.size[0] * k), int(room.size[1] * k))
        if room.gate:
            color = GATE_COLOR
        elif current is not None and room.name == current.name:
            color = ROOM_CURRENT
        elif world.is_realized(room):
            color = ROOM_REALIZED
        else:
            color = ROOM_COLOR
        pygame.draw.rect(surface, color, rect, 0 if room.gate else 2)
        for ax, ay in room.anchors:
            pygame.draw.circle(surface, ANCHOR_COLOR,
                               world_to_screen(scene, surface, ax, ay), 2)


def draw_target(surface: pygame.Surface, scene) -> None:
    st = scene.controller.state
    if not st.transitioning:
        return
    a = world_to_screen(scene, surface, *st.start)
    b = world_to_screen(scene, surface, *st.target)
    pygame.draw.line(surface, (90, 60, 50), a, b, 1)
    pygame.draw.circle(surface, TARGET_COLOR, b, 5, 1)


def draw_camera(surface: pygame.Surface) -> None:
    sw, sh = surface.get_size()
    mx, my = sw // 2, sh // 2
    csize = 10
    gap = 3
    color = (220, 220, 220)
    pygame.draw.line(surface, color, (mx - csize, my), (mx - gap, my), 1)
    pygame.draw.line(surface, color, (mx + gap, my), (mx + csize, my), 1)
    pygame.draw.line(surface, color, (mx, my - csize), (mx, my - gap), 1)
    pygame.draw.line(surface, color, (mx, my + gap), (mx, my + csize), 1)


# ── HUD ────────────────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App, scene) -> None:
    s = scene.controller.status()
    sw = surface.get_width()
    y = 8

    lines = [
        (f"{s.region_name} ({s.region})", (230, 230, 150)),
        (f"Room: {s.current_room or '-'}"
         + (f"  -> {s.next_room}" if s.next_room else ""), (200, 220, 255)),
        (f"Previous: {s.previous_room or '-'}", (150, 150, 180)),
        (f"Rooms explored: {s.rooms_explored}", (180, 200, 180)),
        (f"Regions: {s.regions_explored}/{s.total_regions}"
         f"  [{s.campaign}]", (180, 200, 180)),
    ]
    if s.region_trigger == "cycle":
        lines.append((f"Rotation in: {format_time(s.countdown_remaining)}",
                      (255, 200, 120)))
    else:
        lines.append((f"Region: {format_time(s.region_timer)}"
                      f" / {format_time(s.region_duration)}", (255, 200, 120)))
    for text, color in lines:
        app.draw_text_bg(surface, text, 8, y, color)
        y += 18

    right = [
        f"Mode: {s.camera_mode}",
        f"Next region: {s.next_region}",
        f"Prev region: {s.previous_region}",
    ]
    if s.room_locked:
        right.append("ROOM LOCKED")
    if s.awaiting_world:
        right.append("loading region...")
    ry = 8
    for text in right:
        app.draw_text_bg(surface, text, sw - 200, ry, (200, 200, 255))
        ry += 18


def draw_log(surface: pygame.Surface, app: App, scene, n: int = 6) -> None:
    """Most recent scheduler log lines, bottom-left."""
    entries = scene.controller.log.recent(n)
    sh = surface.get_height()
    y = sh - 8 - 14 * len(entries)
    for e in entries:
        color = (255, 110, 110) if e["cat"] == "error" else (150, 150, 150)
        app.draw_text(surface, f"{e['t']:7.1f} {e['cat']:<10} {e['msg']}",
                      8, y, color, font=app.font_sm)
        y += 14


def draw_help(surface: pygame.Surface, app: App) -> None:
    sw, sh = surface.get_size()
    text = ("N/Right next  G/B region  L lock  C camera  "
            "+/- duration  H hud  F4 tuning  Esc quit")
    app.draw_text(surface, text, sw - 8 - len(text) * 7, sh - 18,
                  (110, 110, 120), font=app.font_sm)
