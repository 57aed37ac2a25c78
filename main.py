# main.py

import pygame
import constants
import json
import logging
import logger_setup
import numpy as np
from animator import ParticleFieldAnimator
from render_loop import PygameRenderLoop

# Get the application's dedicated logger
logger = logging.getLogger("particle_field")


def main(config_path='config.json', max_frames=None):
    """
    Opens a resizable window and runs the particle field as its background
    until the window is closed.
    """
    # --- Setup ---
    logger_setup.setup_logging(config_path)

    with open(config_path, 'r') as f:
        config = json.load(f)
    window = config.get('window', {})
    width = window.get('width', constants.WIDTH)
    height = window.get('height', constants.HEIGHT)

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    try:
        screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption(constants.TITLE)
        clock = pygame.time.Clock()

        loop = PygameRenderLoop(
            screen,
            clock,
            fps=window.get('fps', constants.FPS),
            page_color=window.get('page_color', constants.PAGE_COLOR),
            scroll_step=window.get('scroll_step', constants.SCROLL_STEP),
        )
        animator = ParticleFieldAnimator(config.get('field', {}), rng, screen.get_size())

        with animator.mounted(loop):
            loop.run(max_frames)
    finally:
        logger.info("Application shutting down.")
        pygame.quit()


if __name__ == "__main__":
    main()
