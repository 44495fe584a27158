"""
core/scene.py — Scene interface

The preview app holds a stack of scenes.  Only the top scene gets
update/draw calls; scenes below stay frozen.

    class OverlayScene(Scene):
        def handle_event(self, event, app):
            ...

        def update(self, dt, app):
            # dt is seconds since last frame
            ...

        def draw(self, surface, app):
            ...
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    def on_enter(self, app: App):
        """Called when this scene becomes active (pushed or revealed)."""
        pass

    def on_exit(self, app: App):
        """Called when this scene is removed or covered."""
        pass

    def handle_event(self, event: pygame.event.Event, app: App):
        pass

    def update(self, dt: float, app: App):
        pass

    def draw(self, surface: pygame.Surface, app: App):
        pass
