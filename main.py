# main.py
import sys
import logging
from pathlib import Path
from typing import Dict

from src.LoggingSetup import setup_logging


# ============================================================================
# PATH RESOLUTION
# ============================================================================
def resolve_paths(script_path: Path) -> Dict[str, Path]:
    """
    Resolves application paths relative to the main script.

    Layout:
        project/
        ├── main.py
        ├── src/
        ├── config/            # CONFIG_DIR
        └── logs/              # LOGS_DIR

    Args:
        script_path: Path to main script

    Returns:
        Dictionary with resolved paths
    """
    project_dir = script_path.resolve().parent
    return {
        "APP_DIR": project_dir,
        "CONFIG_DIR": project_dir / "config",
        "LOGS_DIR": project_dir / "logs",
    }


def parse_args(argv: list[str], paths: Dict[str, Path]) -> Dict:
    """
    Parse command line flags.

    Flags:
        -v                 verbose (DEBUG) logging
        --config=PATH      configuration file (default: config/dictation_config.json)
        --server-url=URL   recognition service URL, overrides engine.server_url

    Args:
        argv: Arguments without the program name
        paths: Resolved paths from resolve_paths()

    Returns:
        Dictionary with keys verbose, config_path, server_url
    """
    options = {
        "verbose": "-v" in argv,
        "config_path": paths["CONFIG_DIR"] / "dictation_config.json",
        "server_url": None,
    }
    for arg in argv:
        if arg.startswith("--config="):
            options["config_path"] = Path(arg.split("=", 1)[1])
        elif arg.startswith("--server-url="):
            options["server_url"] = arg.split("=", 1)[1]
    return options


if __name__ == "__main__":
    PATHS = resolve_paths(Path(__file__))
    try:
        options = parse_args(sys.argv[1:], PATHS)

        is_frozen = getattr(sys, 'frozen', False)

        # Setup logging BEFORE anything else
        setup_logging(PATHS["LOGS_DIR"], verbose=options["verbose"], is_frozen=is_frozen)

        from src.ConfigLoader import load_config
        from src.DictationApp import DictationApp

        config = load_config(options["config_path"])
        if options["server_url"]:
            config["engine"]["server_url"] = options["server_url"]

        app = DictationApp(config)
        app.run()

    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logging.error(f"ERROR: {type(e).__name__}: {e}")
        import traceback
        logging.error(traceback.format_exc())
        sys.exit(1)
