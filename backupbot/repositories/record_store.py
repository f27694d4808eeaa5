"""
Repositorio de registros de configuración e inquilinos (Dependency Inversion)
"""
from typing import Any, Dict, List, Optional, Sequence, Union
import pymysql.cursors

from ..config import Config
from ..logger import LoggerService
from ..models import DeliveryTarget, TenantRecord
from ..sql import quote_identifier


class RecordStore:
    """Lectura de registros desde las tablas de la aplicación"""

    MODES = ("select", "fetchAll")

    def __init__(self, connection):
        """
        Inicializa el repositorio

        Args:
            connection: Conexión PyMySQL abierta
        """
        self.connection = connection
        self.logger = LoggerService.get_logger("RecordStore")

    def fetch(
        self,
        table: str,
        fields: Union[str, Sequence[str]] = "*",
        where: Optional[Dict[str, Any]] = None,
        mode: str = "select"
    ) -> Union[Optional[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Consulta una tabla

        Args:
            table: Nombre de la tabla
            fields: "*" o lista de columnas
            where: Filtro de igualdad {columna: valor}
            mode: "select" devuelve la primera fila (o None), "fetchAll" todas

        Returns:
            Fila como diccionario, o lista de filas
        """
        if mode not in self.MODES:
            raise ValueError(f"Modo de consulta no soportado: {mode}")

        if fields == "*":
            columns = "*"
        elif isinstance(fields, str):
            columns = quote_identifier(fields)
        else:
            columns = ", ".join(quote_identifier(f) for f in fields)

        query = f"SELECT {columns} FROM {quote_identifier(table)}"
        params = []
        if where:
            conditions = []
            for column, value in where.items():
                conditions.append(f"{quote_identifier(column)} = %s")
                params.append(value)
            query += " WHERE " + " AND ".join(conditions)

        with self.connection.cursor(pymysql.cursors.DictCursor) as cursor:
            cursor.execute(query, params or None)
            if mode == "select":
                return cursor.fetchone()
            return list(cursor.fetchall())

    def get_delivery_target(self) -> DeliveryTarget:
        """
        Obtiene el canal y el tema donde se reportan los backups

        Raises:
            ValueError: si el canal de reportes no está configurado
        """
        setting = self.fetch(Config.SETTINGS_TABLE, "*")
        if not setting or not setting.get("Channel_Report"):
            raise ValueError("No hay canal de reportes configurado (setting.Channel_Report)")

        topic = self.fetch(
            Config.REPORT_TOPICS_TABLE,
            "idreport",
            {"report": Config.BACKUP_REPORT_KEY}
        )
        thread_id = topic.get("idreport") if topic else None
        if thread_id is None:
            self.logger.warning(
                f"No hay tema configurado para '{Config.BACKUP_REPORT_KEY}', "
                "se enviará al canal sin tema"
            )

        return DeliveryTarget(
            channel_id=str(setting["Channel_Report"]),
            thread_id=str(thread_id) if thread_id is not None else None
        )

    def get_tenants(self) -> List[TenantRecord]:
        """
        Obtiene la lista de inquilinos

        Returns:
            Lista de TenantRecord; las filas inválidas se omiten
        """
        tenants = []
        for row in self.fetch(Config.TENANTS_TABLE, "*", mode="fetchAll"):
            try:
                tenants.append(TenantRecord(
                    tenant_id=row.get("id_user"),
                    username=row.get("username")
                ))
            except ValueError as e:
                self.logger.error(f"Registro de inquilino inválido {row!r}: {e}")
        return tenants
