"""
scenes/tour_scene.py — Unattended tour preview

Shows the loaded region's rooms as rectangles (gates filled), camera
anchors as dots and the tour camera as a crosshair at the screen
centre.  The TourController moves the camera; keys poke its mutators:

    N / Right   next location now        L   toggle room lock
    G / B       region forward / back    C   cycle camera mode
    + / -       region duration ±1 min   H   toggle HUD
    (Shift ×5)                           F4  reload data/tuning.toml
    Esc         quit
"""

from __future__ import annotations
import pygame

from core.app import App
from core.events import CampaignSweepComplete, EventBus, RoomChanged
from core.scene import Scene
from core import tuning as tuning_mod
from tour.controller import TourController
from tour.regions import next_campaign
from tour.settings import REGION_DURATION_STEP, TourSettings
from tour.world_model import RoomGraph
from scenes.tour_draw import (
    draw_camera, draw_help, draw_hud, draw_log, draw_rooms, draw_target,
)


class TourScene(Scene):
    def __init__(self, world: RoomGraph, settings: TourSettings | None = None,
                 scale: float = 2.5):
        self.world = world
        self.settings = settings or TourSettings()
        self.scale = scale
        self.show_hud = True
        self.bus = EventBus()
        self.controller = TourController(world, self.settings, bus=self.bus)

    def on_enter(self, app: App):
        bus = self.bus
        ctrl = self.controller

        def _on_sweep_complete(ev):
            ctrl.reset_campaign(next_campaign(ev.campaign))

        def _on_room_changed(ev):
            print(f"[TOUR] {ev.region}: {ev.previous or '-'} -> {ev.room}")

        bus.subscribe(CampaignSweepComplete, _on_sweep_complete)
        bus.subscribe(RoomChanged, _on_room_changed)

    def on_exit(self, app: App):
        self.controller.on_shutdown()
        self.bus.drain()

    # ── event handler ────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event, app: App):
        if event.type != pygame.KEYDOWN:
            return
        ctrl = self.controller
        key = event.key
        shift = bool(event.mod & pygame.KMOD_SHIFT)

        if key == pygame.K_ESCAPE:
            app.quit()
        elif key in (pygame.K_n, pygame.K_RIGHT):
            ctrl.force_immediate_change()
        elif key == pygame.K_g:
            ctrl.advance_region(1)
        elif key == pygame.K_b:
            ctrl.advance_region(-1)
        elif key == pygame.K_l:
            ctrl.toggle_room_lock()
        elif key == pygame.K_c:
            ctrl.set_camera_mode(ctrl.camera_mode.next())
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            ctrl.adjust_region_duration(REGION_DURATION_STEP * (5 if shift else 1))
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            ctrl.adjust_region_duration(-REGION_DURATION_STEP * (5 if shift else 1))
        elif key == pygame.K_h:
            self.show_hud = not self.show_hud
        elif key == pygame.K_F4:
            tuning_mod.reload()
            ctrl.apply_settings(TourSettings.from_tuning(tuning_mod.section("tour")))

    # ── update ───────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        self.world.advance(dt)
        self.controller.on_tick(dt)
        self.bus.drain()

    # ── draw ─────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((20, 20, 25))
        if self.world.is_ready():
            draw_rooms(surface, self)
            draw_target(surface, self)
        draw_camera(surface)
        if self.show_hud:
            draw_hud(surface, app, self)
            draw_log(surface, app, self)
            draw_help(surface, app)
