import argparse
import signal
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QTimer

from traineer.catalog import Catalog
from traineer.config_manager import ConfigManager
from traineer.logger import setup_logger
from traineer.paths import get_base_dir, get_log_dir, resolve_catalog_path, resolve_config_path
from traineer.scenario_scheduler import ScheduleMode
from traineer.trainer import Trainer


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a trainer and present its scenarios.")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    parser.add_argument("--catalog", type=Path, default=None, help="Path to the content catalog (YAML or JSON)")
    parser.add_argument("--debug", action="store_true", help="Log to the console as well")
    return parser.parse_args(argv)


def _present_step(title: str, description: str) -> None:
    print(title)
    print(description)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName("Traineer")

    config_path = args.config or resolve_config_path()
    config = ConfigManager(config_path).load()
    logger = setup_logger(get_log_dir(), debug=args.debug or config.behavior.debug_mode)
    logger.info("Application starting. base_dir=%s config=%s", get_base_dir(), config_path)

    catalog_path = args.catalog or resolve_catalog_path(config_path, config.behavior.catalog_path)
    catalog = Catalog.load(catalog_path)
    logger.info("Catalog loaded from %s (%d records)", catalog_path, len(catalog))

    trainer = Trainer.from_config(config, catalog)
    trainer.step_presented.connect(_present_step)
    trainer.mood_changed.connect(lambda mood: logger.info("Mood is now %.2f (%s)", mood, trainer.mood_label))
    if trainer.scheduler.mode is ScheduleMode.SINGLE_SHOT:
        trainer.scheduler.finished.connect(app.quit)

    def _shutdown(*_args) -> None:
        trainer.shutdown()
        app.quit()

    signal.signal(signal.SIGINT, _shutdown)
    # Wake the interpreter periodically so SIGINT is handled while Qt owns the loop.
    wakeup = QTimer()
    wakeup.timeout.connect(lambda: None)
    wakeup.start(250)

    trainer.init()
    exit_code = app.exec()
    trainer.shutdown()
    logger.info("Application stopped. mood=%.2f", trainer.mood)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
