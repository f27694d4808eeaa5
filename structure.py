"""
backupbot/
│
├── backupbot/
│   ├── __init__.py
│   ├── config.py                 # Configuración y constantes
│   ├── logger.py                 # Servicio de logging
│   ├── models.py                 # Modelos de datos y resultados
│   ├── sql.py                    # Utilidades de SQL
│   ├── repositories/
│   │   ├── __init__.py
│   │   ├── connection.py         # Conexión a MySQL
│   │   └── record_store.py       # Lecturas de configuración e inquilinos
│   ├── strategies/
│   │   ├── __init__.py
│   │   ├── base_strategy.py      # Estrategia base abstracta
│   │   ├── mysql_strategy.py     # Volcado con mysqldump
│   │   └── table_export_strategy.py # Volcado tabla por tabla
│   ├── services/
│   │   ├── __init__.py
│   │   ├── archive_service.py    # Archivos ZIP
│   │   ├── backup_service.py     # Orquestador del backup principal
│   │   ├── cleanup_service.py    # Limpieza de artefactos
│   │   ├── dump_service.py       # Cadena de estrategias de volcado
│   │   ├── job_service.py        # Ejecución completa
│   │   ├── lock_service.py       # Bloqueo de ejecución
│   │   ├── notification_service.py # Cliente de Telegram
│   │   ├── scheduler_service.py  # Servicio de programación
│   │   └── tenant_service.py     # Archivado de inquilinos
│   └── factories/
│       ├── __init__.py
│       └── strategy_factory.py   # Factory de estrategias
│
├── tests/
│   ├── __init__.py
│   ├── fakes.py                  # Dobles de prueba
│   └── test_*.py                 # Tests unitarios
│
├── main.py                       # Punto de entrada
├── pyproject.toml
├── .env.example                  # Generado con --init
└── README.md
"""
