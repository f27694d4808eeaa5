"""
Utilidades de SQL para MySQL/MariaDB
"""


def quote_identifier(name: str) -> str:
    """Entrecomilla un identificador con backticks duplicando los internos"""
    return "`" + str(name).replace("`", "``") + "`"
