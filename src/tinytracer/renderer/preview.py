# renderer/preview.py
"""
Optional on-screen preview of a finished frame.

Shows the 8-bit image in a pygame window, scaled up by an integer factor,
until the window is closed.
"""
import numpy as np
import pygame


def frame_to_surface(pixels: np.ndarray) -> "pygame.Surface":
    """
    Converts an (H, W, 3) uint8 image into a pygame surface. pygame indexes
    surfaces [x, y], so the array is transposed first.
    """
    return pygame.surfarray.make_surface(np.transpose(pixels, (1, 0, 2)))


def show_preview(pixels: np.ndarray, scale: int = 1, title: str = "tinytracer"):
    height, width = pixels.shape[:2]
    window_size = (width * scale, height * scale)

    pygame.init()
    try:
        screen = pygame.display.set_mode(window_size)
        pygame.display.set_caption(title)

        surf = frame_to_surface(pixels)
        surf = pygame.transform.scale(surf, window_size)

        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
            screen.blit(surf, (0, 0))
            pygame.display.flip()
            clock.tick(30)
    finally:
        pygame.quit()
