"""
Interactive pygame host for the pattern session.

Runs one batch of attractor steps per frame, blits the accumulation buffer and
ticks the restart countdown once per second of frames.

Controls:
  SPACE       Pause / Resume
  N           New pattern with default settings
  R           Restart the current pattern
  H           Toggle HUD overlay
  Q / ESC     Quit
"""

from typing import Optional

import pygame

from patterngen import status
from patterngen.config import PatternConfig, ViewerConfig, default_config
from patterngen.session import PatternSession
from patterngen.surface import PixelSurface

HUD_COLOR = (200, 200, 200)
HUD_SHADOW = (0, 0, 0)


class Viewer:
    """Window, clock and key handling around one ``PatternSession``."""

    def __init__(
        self,
        config: Optional[ViewerConfig] = None,
        pattern: Optional[PatternConfig] = None,
    ):
        self.cfg = config or ViewerConfig()
        self.surface = PixelSurface(self.cfg.width, self.cfg.height)
        self.session = PatternSession(
            self.surface,
            config_factory=lambda: default_config(self.cfg.width, self.cfg.batch_size),
        )
        self.first_pattern = pattern
        self.running = True
        self.show_hud = self.cfg.show_hud
        self.frame_count = 0
        self.hud_font = None

    def start_pattern(self, pattern: Optional[PatternConfig] = None) -> PatternConfig:
        config = self.session.reset_pattern(pattern)
        print(
            f"New {config.family.label} pattern, seed {config.seed}, "
            f"{config.iteration_budget} steps",
            flush=True,
        )
        return config

    def update(self) -> None:
        """One host frame: a batch, and a countdown tick every ``fps`` frames."""
        self.session.run_batch(self.cfg.batch_size)
        self.frame_count += 1
        if self.frame_count % self.cfg.fps == 0 and self.session.tick():
            cfg = self.session.config
            print(f"New {cfg.family.label} pattern, seed {cfg.seed}", flush=True)

    def render(self, screen: pygame.Surface) -> None:
        rgb = self.surface.present()
        frame = pygame.surfarray.make_surface(rgb.swapaxes(0, 1).copy())
        screen.blit(frame, (0, 0))
        if self.show_hud and self.hud_font is not None:
            self._draw_hud(screen)

    def _draw_hud(self, screen: pygame.Surface) -> None:
        session = self.session
        lines = []
        if session.config is not None:
            lines.append(f"{session.config.family.label}  {status.seed_label(session.config.seed)}")
        text = session.status_text
        if text:
            lines.append(text)
        lines.append(f"[SPACE] {status.pause_label(session.paused)}")

        y = self.cfg.height - 10 - len(lines) * (self.cfg.font_size + 4)
        for line in lines:
            shadow = self.hud_font.render(line, True, HUD_SHADOW)
            label = self.hud_font.render(line, True, HUD_COLOR)
            screen.blit(shadow, (11, y + 1))
            screen.blit(label, (10, y))
            y += self.cfg.font_size + 4

    def _handle_keydown(self, key: int) -> None:
        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False
        elif key == pygame.K_SPACE:
            self.session.toggle_pause()
        elif key == pygame.K_n:
            self.start_pattern()
        elif key == pygame.K_r:
            self.start_pattern(self.session.config)
        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

    def run(self) -> None:
        """Main viewer loop."""
        pygame.init()
        screen = pygame.display.set_mode((self.cfg.width, self.cfg.height))
        pygame.display.set_caption("Random Pattern Generator")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont(self.cfg.font, self.cfg.font_size)

        self.start_pattern(self.first_pattern)

        while self.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event.key)

            self.update()
            self.render(screen)
            pygame.display.flip()
            clock.tick(self.cfg.fps)

        pygame.quit()
