"""
Envío de mensajes y documentos a Telegram
"""
from pathlib import Path
from typing import Optional
import requests
from ..config import Config
from ..logger import LoggerService


class TelegramNotifier:
    """Cliente mínimo de la Bot API de Telegram (best-effort, sin reintentos)"""

    def __init__(self, token: Optional[str] = None, api_url: Optional[str] = None,
                 timeout: Optional[int] = None, session: Optional[requests.Session] = None):
        """
        Args:
            token: Token del bot (por defecto Config.TELEGRAM_BOT_TOKEN)
            api_url: URL base de la API
            timeout: Segundos máximos de espera por petición
            session: Sesión HTTP reutilizable
        """
        self.token = token if token is not None else Config.TELEGRAM_BOT_TOKEN
        self.api_url = (api_url or Config.TELEGRAM_API_URL).rstrip("/")
        self.timeout = timeout or Config.TELEGRAM_TIMEOUT
        self.session = session or requests.Session()
        self.logger = LoggerService.get_logger("TelegramNotifier")

    def _endpoint(self, method: str) -> str:
        return f"{self.api_url}/bot{self.token}/{method}"

    @staticmethod
    def _base_payload(channel, thread) -> dict:
        payload = {"chat_id": channel}
        if thread is not None:
            payload["message_thread_id"] = thread
        return payload

    def send_text(self, channel, thread, text: str) -> bool:
        """
        Envía un mensaje de texto

        Returns:
            True si Telegram aceptó el mensaje
        """
        payload = self._base_payload(channel, thread)
        payload["text"] = text
        return self._call("sendMessage", data=payload)

    def send_document(self, channel, thread, file_path, caption: str,
                      parse_mode: Optional[str] = None) -> bool:
        """
        Envía un archivo como documento

        Args:
            channel: Chat de destino
            thread: Tema dentro del chat (opcional)
            file_path: Archivo a enviar
            caption: Texto que acompaña al documento
            parse_mode: "HTML" o "MarkdownV2" si el caption tiene formato

        Returns:
            True si Telegram aceptó el documento
        """
        file_path = Path(file_path)
        payload = self._base_payload(channel, thread)
        payload["caption"] = caption
        if parse_mode:
            payload["parse_mode"] = parse_mode

        try:
            with open(file_path, "rb") as document:
                return self._call(
                    "sendDocument",
                    data=payload,
                    files={"document": (file_path.name, document)}
                )
        except OSError as e:
            self.logger.error(f"No se pudo leer el documento {file_path}: {e}")
            return False

    def _call(self, method: str, data: dict, files: Optional[dict] = None) -> bool:
        try:
            response = self.session.post(
                self._endpoint(method),
                data=data,
                files=files,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            self.logger.error(f"Error de red en {method}: {e}")
            return False

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code != 200 or not body.get("ok", False):
            description = body.get("description") or response.text[:200]
            self.logger.error(f"Telegram rechazó {method} ({response.status_code}): {description}")
            return False

        return True
