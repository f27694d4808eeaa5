"""
Construcción de archivos ZIP a partir de archivos y directorios
"""
import importlib.util
import os
import zipfile
from pathlib import Path
from typing import Iterator, Optional, Set, Tuple, Union
from ..logger import LoggerService

PathLike = Union[str, Path]


def relative_archive_path(path: PathLike, base_path: PathLike) -> str:
    """
    Calcula la ruta dentro del archivo quitando el prefijo base_path

    Args:
        path: Ruta en disco
        base_path: Ruta base

    Returns:
        Ruta relativa sin separadores iniciales
    """
    path_str = str(path)
    normalized_base = str(base_path).rstrip(os.sep) + os.sep
    if path_str.startswith(normalized_base):
        path_str = path_str[len(normalized_base):]
    return path_str.lstrip(os.sep)


def _dir_key(path: PathLike) -> Tuple[int, int]:
    st = os.stat(path)
    return st.st_dev, st.st_ino


def walk_tree(root: PathLike, _visited: Optional[Set[Tuple[int, int]]] = None) -> Iterator[os.DirEntry]:
    """
    Recorre root en profundidad devolviendo cada directorio antes que su contenido

    Las entradas se ordenan por nombre; los enlaces simbólicos se siguen, pero
    un directorio ya visitado (por ejemplo un enlace a un ancestro) se omite.
    """
    if _visited is None:
        _visited = {_dir_key(root)}

    with os.scandir(root) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        if entry.is_dir():
            key = _dir_key(entry.path)
            if key in _visited:
                continue
            _visited.add(key)
            yield entry
            yield from walk_tree(entry.path, _visited)
        else:
            yield entry


def add_path_to_archive(archive: zipfile.ZipFile, path: PathLike, base_path: PathLike) -> None:
    """
    Añade un archivo o un directorio completo al archivo abierto

    Args:
        archive: ZipFile abierto en modo escritura
        path: Archivo o directorio a añadir
        base_path: Ruta base para calcular las rutas relativas
    """
    path = Path(path)

    if path.is_dir():
        # La propia carpeta va antes que su contenido
        root_relative = relative_archive_path(path, base_path)
        if root_relative:
            _add_directory_entry(archive, root_relative)
        for entry in walk_tree(path):
            relative = relative_archive_path(entry.path, base_path)
            if entry.is_dir():
                _add_directory_entry(archive, relative)
            elif entry.is_file():
                archive.write(entry.path, relative)
    elif path.is_file():
        archive.write(path, relative_archive_path(path, base_path))


def _add_directory_entry(archive: zipfile.ZipFile, relative: str) -> None:
    name = relative.replace(os.sep, "/").rstrip("/") + "/"
    info = zipfile.ZipInfo(name)
    # drwxr-xr-x más el bit de directorio de MS-DOS
    info.external_attr = (0o40755 << 16) | 0x10
    archive.writestr(info, b"")


class ArchiveService:
    """Servicio de creación de archivos ZIP"""

    def __init__(self):
        self.logger = LoggerService.get_logger("ArchiveService")

    def is_supported(self) -> bool:
        """Indica si hay soporte de compresión (zlib) en este entorno"""
        return importlib.util.find_spec("zlib") is not None

    def open_archive(self, zip_path: PathLike) -> zipfile.ZipFile:
        """
        Abre un archivo ZIP nuevo, sobrescribiendo uno existente

        Raises:
            OSError: si no se puede crear el archivo
        """
        return zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED)

    def add_path(self, archive: zipfile.ZipFile, path: PathLike, base_path: PathLike) -> None:
        if not Path(path).exists():
            self.logger.debug(f"Ruta inexistente, se omite: {path}")
            return
        add_path_to_archive(archive, path, base_path)

    def create_single_file_archive(self, file_path: PathLike, zip_path: PathLike) -> None:
        """
        Crea un ZIP con un único archivo guardado con su nombre base

        Raises:
            OSError: si no se puede escribir el archivo
        """
        file_path = Path(file_path)
        with self.open_archive(zip_path) as archive:
            archive.write(file_path, file_path.name)
        self.logger.info(f"Archivo comprimido creado: {Path(zip_path).name}")
