# Stone End - terminal front end
# Reads one line per turn, hands it to the engine and prints the narration.

import logging
import sys

# Import settings from config.py
from config import settings
from engine import GameEngine
from grid import MapError
from loader import LevelLoadError, load_world
from utils import Colors, read_text_file
from world import WorldError

# ============================================================================
# Logging Configuration
# ============================================================================
engine_logger = logging.getLogger()
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
if settings.log_file:
    file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    file_handler.setFormatter(formatter)
    engine_logger.addHandler(file_handler)
else:
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    engine_logger.addHandler(stream_handler)
engine_logger.setLevel(settings.log_level.upper())

# ============================================================================
# Command Line Interface
# ============================================================================
class GameCLI:
    """Command line interface for the game"""
    def __init__(self, engine: GameEngine, intro: str = ""):
        self.engine = engine
        self.intro = intro
        self.running = False

    def prompt(self, text: str = "» ") -> str:
        return input(text).strip().lower()

    def prompt_yes_no(self, message: str) -> bool:
        while True:
            print(f"{message} (yes, no)")
            response = self.prompt()
            if response in ("yes", "y"): return True
            if response in ("no", "n"): return False
            print("What was that?")

    def start(self):
        if self.intro:
            print(self.intro + "\n")
        result = self.engine.new_game()
        print(f"{Colors.BOLD}{result.message}{Colors.ENDC}")

    def process_command(self, command: str) -> bool:
        cmd = command.strip().lower()
        if cmd in ["quit", "exit", "q"]: return False
        if cmd == "restart":
            if self.prompt_yes_no("Are you sure you want to erase your game and restart?"):
                self.start()
            else:
                print("Let's keep playing!")
            return True

        result = self.engine.process(cmd)
        color = Colors.ENDC if result.success else Colors.YELLOW
        if result.game_over:
            color = Colors.RED
        print(f"{color}{result.message}{Colors.ENDC}\n")
        if result.game_over:
            if self.prompt_yes_no("Would you like to start again?"):
                self.start()
            else:
                return False
        return True

    def main_loop(self):
        self.start()
        self.running = True
        while self.running:
            try:
                command = self.prompt()
                print()
                if not self.process_command(command): self.running = False
            except (KeyboardInterrupt, EOFError):
                print("\n"); self.running = False
            except Exception as e:
                print(f"\nAn unexpected error occurred: {e}")
                logging.exception("An unexpected error occurred in the main loop")
        print("Thanks for playing!")

def main() -> int:
    try:
        world = load_world(settings.level_path, settings.items_path)
    except (LevelLoadError, MapError, WorldError) as e:
        print(f"{Colors.RED}{e}{Colors.ENDC}", file=sys.stderr)
        return 1
    engine = GameEngine(
        world,
        starting_items=settings.starting_items,
        help_text=read_text_file(settings.help_path),
        line_width=settings.line_width,
        indent=settings.indent,
    )
    GameCLI(engine, intro=read_text_file(settings.intro_path)).main_loop()
    return 0

# ============================================================================
# Main Entry Point
# ============================================================================
if __name__ == "__main__":
    sys.exit(main())
