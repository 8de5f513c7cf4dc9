import logging

from clip_reader.core.utils import ConfigState, Utils
from pathlib                import Path

class ModuleLogger:
    """
    Per-module file logger. The directory, level and line format come from logging.yml;
    each module writes to <directory>/<module>.log and never propagates to the root logger.
    """
    PROJECT_ROOT = Utils.find_root('pyproject.toml')
    PARAMS_FILE  = PROJECT_ROOT / 'clip_reader' / 'config' / 'logging.yml'

    def __init__(self, module_name: str, config_file: Path | None = None):
        """
        Args:
            module_name : Short module name, used for the logger name and the file name
            config_file : Optional custom path to logging.yml
        """
        settings      = ConfigState.load(config_file or self.PARAMS_FILE).config_dict
        self.logs_dir = self.PROJECT_ROOT / settings['directory']
        self.level    = logging.getLevelName(str(settings.get('level', 'INFO')).upper())
        self.format   = settings.get('format', '%(asctime)s - %(levelname)s - %(message)s')
        self.logger   = logging.getLogger(f'clip_reader.{module_name}')
        self.log_file = self.logs_dir / f'{module_name}.log'
        self.configure_logger()

    def configure_logger(self):
        """
        Attaches the file handler once; later instances for the same module reuse it.
        """
        if self.logger.handlers:
            return

        self.logger.setLevel(self.level)
        self.logs_dir.mkdir(parents = True, exist_ok = True)

        handler = logging.FileHandler(self.log_file, mode = 'a', encoding = 'utf-8')
        handler.setFormatter(logging.Formatter(self.format))
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def __call__(self) -> logging.Logger:
        return self.logger
