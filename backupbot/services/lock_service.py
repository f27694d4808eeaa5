"""
Bloqueo por archivo PID para impedir dos ejecuciones simultáneas
"""
import errno
import os
import time
from pathlib import Path
from typing import Optional
from ..logger import LoggerService


class RunLockError(Exception):
    """Otra ejecución mantiene el bloqueo"""


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


class RunLock:
    """
    Context manager sobre un archivo de bloqueo creado con O_EXCL

    Los artefactos llevan la fecha en el nombre, no un identificador de
    instancia, así que dos ejecuciones el mismo día usarían los mismos archivos.
    """

    # Un bloqueo sin PID legible se respeta durante este tiempo: el PID se
    # escribe justo después de crear el archivo
    UNREADABLE_GRACE_SECONDS = 60

    def __init__(self, lock_file: Path):
        self.lock_file = Path(lock_file)
        self.logger = LoggerService.get_logger("RunLock")
        self._acquired = False

    def _read_pid(self) -> Optional[int]:
        try:
            return int(self.lock_file.read_text(encoding='utf-8').strip())
        except (OSError, ValueError):
            return None

    def _lock_age(self) -> Optional[float]:
        try:
            return time.time() - self.lock_file.stat().st_mtime
        except FileNotFoundError:
            return None

    def _is_held(self, pid: Optional[int]) -> bool:
        if pid is not None:
            return _pid_alive(pid)
        age = self._lock_age()
        return age is not None and age < self.UNREADABLE_GRACE_SECONDS

    def acquire(self) -> None:
        """
        Crea el archivo de bloqueo

        Raises:
            RunLockError: si otra ejecución activa mantiene el bloqueo
        """
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)

        for _ in range(2):
            try:
                fd = os.open(str(self.lock_file), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o640)
            except OSError as e:
                if e.errno != errno.EEXIST:
                    raise
                pid = self._read_pid()
                if self._is_held(pid):
                    raise RunLockError(f"Ejecución en curso (PID {pid}): {self.lock_file}")
                self.logger.warning(f"Eliminando bloqueo huérfano: {self.lock_file} (PID {pid})")
                try:
                    self.lock_file.unlink()
                except FileNotFoundError:
                    pass
                continue

            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(str(os.getpid()))
            self._acquired = True
            self.logger.debug(f"Bloqueo adquirido: {self.lock_file}")
            return

        raise RunLockError(f"No se pudo adquirir el bloqueo: {self.lock_file}")

    def release(self) -> None:
        if not self._acquired:
            return
        try:
            self.lock_file.unlink()
            self.logger.debug(f"Bloqueo liberado: {self.lock_file}")
        except FileNotFoundError:
            pass
        finally:
            self._acquired = False

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
