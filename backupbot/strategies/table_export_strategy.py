"""
Estrategia de volcado tabla por tabla usando la conexión abierta
Genera un script SQL con estructura y datos
"""
from datetime import datetime
from pathlib import Path
import pymysql.cursors
from .base_strategy import DumpStrategy
from ..sql import quote_identifier


class TableExportStrategy(DumpStrategy):
    """Camino alternativo: exporta esquema y filas consultando la base de datos"""

    name = "table_export"

    def dump(self, connection, database_name: str, output_file: Path) -> bool:
        """
        Escribe DROP/CREATE/INSERT para cada tabla de la base de datos

        Args:
            connection: Conexión PyMySQL abierta
            database_name: Nombre de la base de datos
            output_file: Archivo de salida (se sobrescribe)

        Returns:
            True si el volcado se completó
        """
        if connection is None:
            self.logger.error("No hay conexión disponible para exportar tablas")
            return False

        try:
            handle = open(output_file, 'w', encoding='utf-8')
        except OSError as e:
            self.logger.error(f"No se pudo abrir el archivo de volcado {output_file}: {e}")
            return False

        with handle:
            handle.write(f"-- Database: {quote_identifier(database_name)}\n")
            handle.write(f"-- Generated at: {datetime.now().isoformat(timespec='seconds')}\n\n")
            handle.write("SET FOREIGN_KEY_CHECKS=0;\n\n")

            tables = self._list_tables(connection)
            for i, table in enumerate(tables, 1):
                create_statement = self._create_statement(connection, table)
                if create_statement is None:
                    self.logger.info(f"[SCHEMA] ({i}/{len(tables)}) {table}: no es una tabla, se omite")
                    continue

                handle.write(f"DROP TABLE IF EXISTS {quote_identifier(table)};\n")
                handle.write(create_statement + ";\n\n")

                rows = self._write_rows(connection, table, handle)
                handle.write("\n")
                self.logger.info(f"[DATA] ({i}/{len(tables)}) {table}: {rows} fila(s)")

            handle.write("SET FOREIGN_KEY_CHECKS=1;\n")

        return True

    def _list_tables(self, connection) -> list:
        with connection.cursor() as cursor:
            cursor.execute("SHOW TABLES")
            return [row[0] for row in cursor.fetchall()]

    def _create_statement(self, connection, table: str):
        """Devuelve el CREATE TABLE nativo, o None si el objeto es una vista"""
        with connection.cursor() as cursor:
            cursor.execute(f"SHOW CREATE TABLE {quote_identifier(table)}")
            row = cursor.fetchone()
            columns = [d[0] for d in cursor.description or []]

        if not row or "Create Table" not in columns:
            return None
        return row[columns.index("Create Table")]

    def _write_rows(self, connection, table: str, handle) -> int:
        """Escribe un INSERT por fila leyendo con un cursor sin buffer"""
        count = 0
        table_name = quote_identifier(table)

        with connection.cursor(pymysql.cursors.SSCursor) as cursor:
            cursor.execute(f"SELECT * FROM {table_name}")
            columns_str = ", ".join(quote_identifier(d[0]) for d in cursor.description)

            for row in cursor:
                values_str = ", ".join(render_value(connection, v) for v in row)
                handle.write(f"INSERT INTO {table_name} ({columns_str}) VALUES ({values_str});\n")
                count += 1

        return count


def render_value(connection, value) -> str:
    """NULL literal para None; el resto pasa por el escape de la conexión"""
    if value is None:
        return "NULL"
    return connection.escape(value)
