# main.py

import json
import logging
import os
import numpy as np
import pygame
import constants
import logger_setup
from assets import load_scene_assets
from scene import SceneState, FrameScheduler
from wish_intake import WishIntake

# Get the application's dedicated logger
logger = logging.getLogger("lantern_scene")


class MusicToggle:
    """Best-effort background music. Any mixer failure leaves the music off."""
    def __init__(self, path: str):
        self.path = path
        self.loaded = False
        self.playing = False

    def toggle(self):
        try:
            if not self.loaded:
                pygame.mixer.init()
                pygame.mixer.music.load(self.path)
                self.loaded = True
            if self.playing:
                pygame.mixer.music.pause()
                self.playing = False
            else:
                if pygame.mixer.music.get_pos() < 0:
                    pygame.mixer.music.play(-1)
                else:
                    pygame.mixer.music.unpause()
                self.playing = True
        except (pygame.error, FileNotFoundError) as e:
            logger.warning(f"Music playback failed: {e}")
            self.playing = False
        logger.info(f"Music {'on' if self.playing else 'off'}.")


def draw_hud(screen, font, intake):
    """Wish prompt, launched counter and the transient launch toast."""
    width, height = screen.get_size()
    prompt = font.render(f"Wish: {intake.buffer}_", True, constants.HUD_TEXT)
    screen.blit(prompt, (16, height - prompt.get_height() - 12))

    counter = font.render(f"Launched {intake.launched_count}", True, constants.HUD_TEXT)
    screen.blit(counter, (width - counter.get_width() - 16, 12))

    if intake.toast_visible:
        toast = font.render(constants.TOAST_TEXT, True, constants.LANTERN_GOLD)
        screen.blit(toast, toast.get_rect(center=(width // 2, 40)))


def handle_event(event, state, intake, music, log_dir):
    """Routes one pygame event. Returns False when the app should quit."""
    if event.type == pygame.QUIT:
        return False

    if event.type == pygame.VIDEORESIZE:
        state.resize(event.w, event.h)
    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        state.fireworks.spawn_at(*event.pos)
    elif event.type == pygame.TEXTINPUT:
        intake.type_text(event.text)
    elif event.type == pygame.KEYDOWN:
        if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            intake.submit(constants.TOAST_DURATION)
        elif event.key == pygame.K_BACKSPACE:
            intake.backspace()
        elif event.key == pygame.K_ESCAPE:
            intake.clear()
        elif event.key == pygame.K_F5:
            intake.reset()
        elif event.key == pygame.K_F6:
            intake.export_csv(os.path.join(log_dir, 'krathong_wishes.csv'))
        elif event.key == pygame.K_F7:
            music.toggle()
    return True


def main():
    """
    Main function to initialize and run the lantern scene.
    """
    # --- Setup ---
    log_dir = logger_setup.setup_logging()

    with open('config.json', 'r') as f:
        config = json.load(f)
    scene_config = config['scene']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 22)
    pygame.key.start_text_input()

    state = SceneState(scene_config, rng, screen.get_size())
    assets = load_scene_assets(state.lanterns.capacity)
    scheduler = FrameScheduler(state, scene_config.get('max_frame_dt', 0.033), assets, font)
    intake = WishIntake(state)
    music = MusicToggle(constants.SONG_PATH)

    # --- Main Loop ---
    running = True
    while running:
        for event in pygame.event.get():
            running = handle_event(event, state, intake, music, log_dir) and running

        # The display surface is replaced on resize, so fetch it every frame.
        screen = pygame.display.get_surface()
        dt = scheduler.run_frame(screen, pygame.time.get_ticks() / 1000.0)
        intake.update(dt)
        draw_hud(screen, font, intake)

        pygame.display.flip()
        clock.tick(constants.FPS)

    logger.info("Application shutting down.")
    pygame.quit()


if __name__ == "__main__":
    main()
