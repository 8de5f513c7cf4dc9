import cv2

from clip_reader import ModuleLogger, Utils
from contextlib  import contextmanager
from dataclasses import dataclass, field, fields
from typing      import Any, Callable, Iterator

logger = ModuleLogger('statistics')()

def stat(label: str, timing: bool = False) -> Any:
    """
    Declares an optional statistic field; None means "not measured yet".
    """
    return field(default = None, metadata = {'label': label, 'timing': timing})

@dataclass
class Statistics:
    """
    Base for the per-stage statistics. Every field is optional and absent
    fields are skipped when reporting. Recording never raises: a failure to
    compute or store a statistic is logged and dropped.
    """

    def record(self, name: str, value: Any | Callable[[], Any]):
        """
        Stores a statistic, evaluating it first when a callable is given.

        Args:
            name  : Field to set
            value : Value, or zero-argument callable producing the value
        """
        try:
            if name not in {f.name for f in fields(self)}:
                raise AttributeError(f"Unknown statistic '{name}'")
            setattr(self, name, value() if callable(value) else value)
        except Exception as e:
            logger.debug(f"Could not record statistic '{name}': {e}")

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        """
        Times the enclosed block into the given field. Errors raised by the block propagate.
        """
        start = cv2.getTickCount()
        yield
        self.record(name, lambda: Utils.elapsed_seconds(start))

    @property
    def total_time(self) -> float:
        """
        Sum of every timing field that has been measured.
        """
        return sum(
            getattr(self, f.name) for f in fields(self)
            if f.metadata.get('timing') and getattr(self, f.name) is not None
        )

    def clear(self):
        for f in fields(self):
            setattr(self, f.name, None)

    def report(self) -> list[str]:
        """
        Renders the measured statistics as 'label: value' lines.

        Returns:
            list: One line per present field, plus the total time when any timing exists
        """
        lines = []
        timed = False
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.metadata.get('timing'):
                timed = True
                lines.append(f"{f.metadata['label']}: {value:.6f} s")
            elif isinstance(value, float):
                lines.append(f"{f.metadata['label']}: {value:.4f}")
            else:
                lines.append(f"{f.metadata['label']}: {value}")

        if timed:
            lines.append(f"Total time: {self.total_time:.6f} s")
        return lines

