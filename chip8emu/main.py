import argparse
import logging
import sys

from .config import load_config
from .cpu import Chip8CPU, disassemble_program
from .errors import Chip8Error, Fault, LoadError
from .keymap import load_keymap
from .loader import load_program, read_program
from .pacing import PacingLoop
from .state import Chip8State

logger = logging.getLogger("chip8emu")


def get_parser():
    parser = argparse.ArgumentParser(prog="chip8emu", description="CHIP-8 emulator")
    parser.add_argument("rom", help="Path to a CHIP-8 program")
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--keymap", "-k", dest="keymap_path", help="YAML key map file")
    parser.add_argument("--ips", dest="instructions_per_second", type=int,
                        help="Instructions per second (default 540)")
    parser.add_argument("--fps", dest="frames_per_second", type=int,
                        help="Frames per second (default 60)")
    parser.add_argument("--scale", type=int, help="Window scale factor (default 10)")
    parser.add_argument("--stats", dest="show_stats", action="store_const", const=True,
                        help="Show FPS and cycles per second")
    parser.add_argument("--debug", action="store_true", help="Log every executed instruction")
    parser.add_argument("--disassemble", action="store_true",
                        help="Print a listing of the program and exit")
    return parser


def main(argv=None):
    args = get_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    try:
        config = load_config(args.config).merged(
            instructions_per_second=args.instructions_per_second,
            frames_per_second=args.frames_per_second,
            scale=args.scale,
            keymap_path=args.keymap_path,
            show_stats=args.show_stats,
            log_level="DEBUG" if args.debug else None,
        )
        logging.getLogger().setLevel(config.log_level)

        data = read_program(args.rom)
        if args.disassemble:
            for address, opcode, text in disassemble_program(data):
                print(f"{address:03X}: {opcode:04X}  {text}")
            return 0

        state = Chip8State()
        load_program(state, data, len(data))
        keymap = load_keymap(config.keymap_path)
    except LoadError as e:
        logger.error("Could not load program: %s", e)
        return 1
    except Chip8Error as e:
        logger.error("%s", e)
        return 1

    try:
        from .frontend import Chip8Window
        window = Chip8Window(state, keymap, scale=config.scale, on_color=config.on_color,
                             off_color=config.off_color, show_stats=config.show_stats)
    except Chip8Error as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.error("Could not create window: %s", e)
        return 1

    loop = PacingLoop(Chip8CPU(state), window,
                      instructions_per_second=config.instructions_per_second,
                      frames_per_second=config.frames_per_second)
    try:
        loop.run()
    except Fault as e:
        logger.error("Emulation halted: %s", e)
        return 1
    finally:
        window.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
