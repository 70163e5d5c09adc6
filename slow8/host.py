import argparse
import logging
import sys
import time

import pygame
from cpuinfo import get_cpu_info

from slow8.errors import EngineFault
from slow8.framebuffer import HEIGHT, WIDTH
from slow8.keypad import NUM_KEYS
from slow8.machine import Chip8
from slow8.state import MAX_PROGRAM_SIZE

logger = logging.getLogger(__name__)

FPS_TARGET = 60
FRAME_TIME_TARGET = 1 / FPS_TARGET
INSTR_PER_FRAME = 11  # 11 is a good default

DEFAULT_SCALE = 24
PIXEL_COLOR = (255, 165, 0)  # orange
BACKGROUND_COLOR = (0, 0, 0)

# key mapping for Chip-8 keys
KEY_MAPPING = {
    pygame.K_1: 0x1,
    pygame.K_2: 0x2,
    pygame.K_3: 0x3,
    pygame.K_4: 0xC,
    pygame.K_q: 0x4,
    pygame.K_w: 0x5,
    pygame.K_e: 0x6,
    pygame.K_r: 0xD,
    pygame.K_a: 0x7,
    pygame.K_s: 0x8,
    pygame.K_d: 0x9,
    pygame.K_f: 0xE,
    pygame.K_z: 0xA,
    pygame.K_x: 0x0,
    pygame.K_c: 0xB,
    pygame.K_v: 0xF,
}


def read_rom(rom_file):
    with open(rom_file, "rb") as f:
        rom = f.read()

    if len(rom) > MAX_PROGRAM_SIZE:
        raise ValueError("ROM too large to fit in memory")
    return rom


def keypad_state(pressed):
    """
    Translate pygame's pressed-key table into the 16 keypad states.
    """
    keys = [False] * NUM_KEYS
    for key, chip_key in KEY_MAPPING.items():
        if pressed[key]:
            keys[chip_key] = True
    return keys


class FrameStats:
    """
    Frame rate bookkeeping for the window caption, refreshed every
    `interval` seconds.
    """

    def __init__(self, system_info, interval=2.0):
        self.system_info = "{} | IPF: {}".format(system_info, INSTR_PER_FRAME)
        self.interval = interval
        self.last_report = time.time()

    def caption(self, frame_time, now):
        """
        Returns the caption for a frame that took `frame_time` seconds
        including sleep, or None while the previous one is still fresh.
        """
        if now - self.last_report < self.interval:
            return None
        self.last_report = now
        fps = 1 / frame_time
        return "{} | FPS: {:.2f} | MIPS: {:.2f}".format(
            self.system_info, fps, (INSTR_PER_FRAME * fps) / 1000000
        )


class Host:

    def __init__(self, machine, scale=DEFAULT_SCALE):
        self.machine = machine
        self.scale = scale
        self.running = True

        # pygame setup
        pygame.init()
        self.screen = pygame.display.set_mode((WIDTH * scale, HEIGHT * scale))

    def close(self):
        pygame.quit()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

        set_key = self.machine.set_key
        for code, is_down in enumerate(keypad_state(pygame.key.get_pressed())):
            set_key(code, is_down)

    def draw_to_screen(self):
        framebuffer = self.machine.framebuffer
        scale = self.scale
        screen = self.screen

        # clear screen
        screen.fill(BACKGROUND_COLOR)

        for y, row in enumerate(framebuffer.rows()):
            py = y * scale
            for x, lit in enumerate(row):
                if lit:
                    screen.fill(PIXEL_COLOR, (x * scale, py, scale, scale))

        pygame.display.flip()
        framebuffer.dirty = False

    def emulate_frame(self):
        machine = self.machine
        machine.tick_timers()
        for _ in range(INSTR_PER_FRAME):
            if machine.awaiting_key:
                break
            machine.step()

    def run(self, system_info):
        stats = FrameStats(system_info)

        while self.running:
            start_time = time.time()

            self.handle_input()
            self.emulate_frame()

            if self.machine.framebuffer.dirty:
                self.draw_to_screen()

            busy_time = time.time() - start_time
            if busy_time < FRAME_TIME_TARGET:
                time.sleep(FRAME_TIME_TARGET - busy_time)

            caption = stats.caption(max(busy_time, FRAME_TIME_TARGET), time.time())
            if caption is not None:
                pygame.display.set_caption(caption)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Runs a Chip-8 ROM")
    parser.add_argument("rom", help="the ROM file to load on startup")
    parser.add_argument(
        "-s", "--scale", type=int, default=DEFAULT_SCALE, dest="scale",
        help="the scale factor to apply to the display (default is {})".format(DEFAULT_SCALE),
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log every executed instruction",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )

    try:
        rom = read_rom(args.rom)
    except (OSError, ValueError) as e:
        logger.error("Cannot load %s: %s", args.rom, e)
        return 1

    machine = Chip8()
    machine.load(rom)
    logger.info("Loaded %d bytes from %s", len(rom), args.rom)

    system_info = "Python: {} | CPU: {}".format(
        sys.version.split()[0],
        get_cpu_info().get("brand_raw", "Unknown CPU"),
    )

    host = Host(machine, scale=args.scale)
    try:
        host.run(system_info)
    except EngineFault as e:
        logger.error("%s\n%s", e, machine.state)
        logger.debug("Screen at fault:\n%s", machine.framebuffer)
        return 1
    finally:
        host.close()
    return 0
