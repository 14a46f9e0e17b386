# src/game/game.py
import sys, argparse
from dataclasses import replace
import pygame
from pygame import K_SPACE, K_UP, K_ESCAPE, K_r
from .config import (
    FPS, COLOR_FG, COLOR_HUD, COLOR_BUTTON, COLOR_BUTTON_EDGE, DEBUG_STATE_LOGS
)
from .controls import InputLatch
from .level import LAYOUTS
from .loop import ClockScheduler, GameLoop
from .render import PygameSurface
from .sim import VARIANTS, new_state

JUMP_KEYS = (K_SPACE, K_UP)


def parse_args(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--variant", choices=sorted(VARIANTS), default="modes",
                   help="classic = cube only, one jump per press; modes = portals + hold to jump")
    p.add_argument("--relayout", choices=LAYOUTS, default=None,
                   help="Course used after a restart (defaults to the variant's choice).")
    p.add_argument("--debug", action="store_true",
                   help="Print simulation state twice per second.")
    return p.parse_args(argv)


def restart_button_rect(w: int, h: int) -> pygame.Rect:
    btn_w, btn_h = 180, 44
    return pygame.Rect((w - btn_w) // 2, h // 2 + 10, btn_w, btn_h)


def run(argv=None):
    args = parse_args(argv)
    config = VARIANTS[args.variant]
    if args.relayout is not None:
        config = replace(config, relayout=args.relayout)

    debug_logs = DEBUG_STATE_LOGS or args.debug
    _print_timer = 0.0 if debug_logs else None

    pygame.init()
    pygame.display.set_caption("Dash Runner")
    screen = pygame.display.set_mode((config.width, config.height), pygame.RESIZABLE)
    font = pygame.font.SysFont("jetbrainsmono", 18)
    big_font = pygame.font.SysFont("jetbrainsmono", 42)

    state = new_state(config)
    latch = InputLatch(hold=config.hold_to_jump)
    scheduler = ClockScheduler(FPS)
    surface = PygameSurface(screen)

    def on_terminal(message: str):
        if debug_logs:
            print(f"[END] {message} ticks={state.ticks} dist={int(state.distance)} cause={state.death_cause}")

    def on_restart():
        if debug_logs:
            print("[RESTART]")

    loop = GameLoop(state, latch, scheduler, surface,
                    on_terminal=on_terminal, on_restart=on_restart)
    loop.start()

    while True:
        dt = scheduler.wait_frame()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                surface.surf = screen
                state.resize(event.w, event.h)
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key in JUMP_KEYS:
                    latch.press()
                if event.key == K_r and state.terminal:
                    loop.restart()
            if event.type == pygame.KEYUP and event.key in JUMP_KEYS:
                latch.release()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if state.terminal:
                    if restart_button_rect(state.viewport_w, state.viewport_h).collidepoint(event.pos):
                        loop.restart()
                else:
                    latch.press()
            if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                latch.release()

        scheduler.run_pending()
        if not loop.running:
            loop.render()  # frozen frame under the overlay

        if _print_timer is not None and not state.terminal:
            _print_timer -= dt
            if _print_timer <= 0.0:
                _print_timer = 0.5
                p = state.player
                print(f"STATE t={state.ticks} y={p.y:.1f} dy={p.dy:.2f} g={p.gravity:+.1f} "
                      f"mode={p.mode.value} ground={p.on_ground} dist={int(state.distance)}")

        # HUD
        hud = f"Mode: {state.player.mode.value}   Dist: {int(state.distance)} px   " \
              f"{'RUNNING' if loop.running else 'STOPPED'}"
        screen.blit(font.render(hud, True, COLOR_FG), (12, 10))
        screen.blit(font.render("SPACE/click jump | R restart | ESC quit", True, COLOR_HUD), (12, 32))

        if state.terminal:
            w, h = state.viewport_w, state.viewport_h
            msg = big_font.render(loop.message, True, COLOR_FG)
            screen.blit(msg, (w // 2 - msg.get_width() // 2, h // 2 - msg.get_height() - 10))

            btn = restart_button_rect(w, h)
            pygame.draw.rect(screen, COLOR_BUTTON, btn, border_radius=10)
            pygame.draw.rect(screen, COLOR_BUTTON_EDGE, btn, width=2, border_radius=10)
            btn_txt = font.render("Restart (R)", True, COLOR_FG)
            screen.blit(btn_txt, (btn.centerx - btn_txt.get_width() // 2,
                                  btn.centery - btn_txt.get_height() // 2))

        pygame.display.flip()


if __name__ == "__main__":
    run()
