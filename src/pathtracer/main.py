# main.py
import logging
import pygame
from pathtracer.config import RENDER_SETTINGS, setup_logging
from pathtracer.renderer.display import to_surface_array
from pathtracer.session import (MOVE_ACTIONS, TURN_ACTIONS, ClickEvent, CloseEvent,
                                ResizeEvent, Session)

logger = logging.getLogger(__name__)

# Held keys mapped to camera actions, in MOVE_ACTIONS then TURN_ACTIONS order
KEY_MAP = dict(zip(
    MOVE_ACTIONS + TURN_ACTIONS,
    (pygame.K_w, pygame.K_s, pygame.K_a, pygame.K_d, pygame.K_SPACE, pygame.K_LSHIFT,
     pygame.K_LEFT, pygame.K_RIGHT, pygame.K_UP, pygame.K_DOWN),
))

class Application:
    def __init__(self, width: int = RENDER_SETTINGS['width'], height: int = RENDER_SETTINGS['height']):
        pygame.init()

        self.window_width = width
        self.window_height = height
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("Ray tracer")

        self.session = Session(width, height)
        self.clock = pygame.time.Clock()
        self.frame_count = 0
        self.key_map = KEY_MAP

    def translate_event(self, event):
        """Map a pygame event onto a session event, or None if it is not one."""
        if event.type == pygame.QUIT:
            return CloseEvent()
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return CloseEvent()
        if event.type == pygame.VIDEORESIZE:
            return ResizeEvent(event.w, event.h)
        if event.type == pygame.MOUSEBUTTONDOWN:
            return ClickEvent(event.pos[0], event.pos[1], event.button)
        return None

    def held_keys(self) -> dict:
        keys = pygame.key.get_pressed()
        return {action: bool(keys[key]) for action, key in self.key_map.items()}

    def present(self, frame):
        if frame.size == 0:
            return
        surface = pygame.surfarray.make_surface(to_surface_array(frame))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def run(self):
        logger.info("Starting render loop at %dx%d", self.window_width, self.window_height)
        try:
            while self.session.running:
                dt = self.clock.tick() / 1000.0

                for event in pygame.event.get():
                    session_event = self.translate_event(event)
                    if session_event is not None:
                        self.session.handle_event(session_event)
                if not self.session.running:
                    break

                self.session.update(dt, self.held_keys())
                frame = self.session.render()
                self.present(frame)

                self.frame_count += 1
                if self.frame_count % 60 == 0:
                    logger.debug("FPS: %.1f, frames since movement: %d",
                                 self.clock.get_fps(), self.session.frames_since_movement)
        finally:
            logger.info("Cleaning up...")
            pygame.quit()

def main():
    setup_logging()
    app = Application()
    app.run()

if __name__ == "__main__":
    main()
