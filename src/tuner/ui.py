from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pygame

MAX_CENTS = 50

IN_TUNE_COLOR = (120, 230, 140)
CLOSE_COLOR = (255, 214, 102)
OFF_COLOR = (240, 110, 100)


@dataclass
class UIState:
    note: Optional[str]
    cents: int
    frequency: Optional[float]
    in_tune: bool
    target_frequency: Optional[float] = None


def needle_offset(cents: float, width: int) -> int:
    cents = max(-MAX_CENTS, min(MAX_CENTS, cents))
    return int(round(cents / MAX_CENTS * (width // 2)))


def cents_color(cents: float, tolerance: float) -> tuple[int, int, int]:
    off = abs(cents)
    if off <= tolerance:
        return IN_TUNE_COLOR
    if off <= tolerance * 4:
        return CLOSE_COLOR
    return OFF_COLOR


class PygameUI:
    def __init__(
        self,
        fullscreen: bool = False,
        size: tuple[int, int] | None = (640, 360),
        tolerance_cents: float = 5.0,
    ):
        pygame.init()
        flags = pygame.FULLSCREEN if fullscreen else 0
        if size is None or fullscreen:
            self.screen = pygame.display.set_mode((0, 0), flags)
        else:
            self.screen = pygame.display.set_mode(size, flags)
        pygame.display.set_caption("Afinador")

        self.tolerance_cents = tolerance_cents
        self.clock = pygame.time.Clock()
        self.width, self.height = self.screen.get_size()
        self.font_note = pygame.font.SysFont("DejaVu Sans", 96, bold=True)
        self.font_meta = pygame.font.SysFont("DejaVu Sans", 28)

    def update(self, state: UIState) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_q):
                return False

        self.screen.fill((10, 12, 18))
        self._draw_scale()
        if state.note is not None:
            self._draw_note(state)
            self._draw_needle(state)
        else:
            self._draw_idle()

        pygame.display.flip()
        self.clock.tick(30)
        return True

    def _draw_scale(self) -> None:
        y = self.height * 2 // 3
        center = self.width // 2
        span = self.width * 2 // 5
        pygame.draw.line(self.screen, (90, 90, 110), (center - span, y), (center + span, y), 2)
        for cents in range(-MAX_CENTS, MAX_CENTS + 1, 10):
            x = center + needle_offset(cents, span * 2)
            tick = 18 if cents == 0 else 10
            pygame.draw.line(self.screen, (140, 140, 160), (x, y - tick), (x, y + tick), 2)

    def _draw_needle(self, state: UIState) -> None:
        y = self.height * 2 // 3
        span = self.width * 2 // 5
        x = self.width // 2 + needle_offset(state.cents, span * 2)
        color = cents_color(state.cents, self.tolerance_cents)
        pygame.draw.line(self.screen, color, (x, y - 40), (x, y + 40), 4)

    def _draw_note(self, state: UIState) -> None:
        color = cents_color(state.cents, self.tolerance_cents)
        note_surf = self.font_note.render(state.note, True, color)
        self.screen.blit(note_surf, note_surf.get_rect(center=(self.width // 2, self.height // 3)))

        freq = f"{state.frequency:6.1f} Hz" if state.frequency else ""
        if state.target_frequency:
            freq += f" / {state.target_frequency:.1f}"
        meta_surf = self.font_meta.render(f"{freq}   {state.cents:+d} cents", True, (180, 220, 255))
        self.screen.blit(meta_surf, meta_surf.get_rect(center=(self.width // 2, self.height - 40)))

    def _draw_idle(self) -> None:
        surf = self.font_meta.render("Toque uma nota...", True, (150, 150, 150))
        self.screen.blit(surf, surf.get_rect(center=(self.width // 2, self.height // 3)))

    def close(self) -> None:
        pygame.quit()
