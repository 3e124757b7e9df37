"""
local-sync: copia registros reales de un entorno remoto (int / stg / prd)
hacia la base de datos local de desarrollo.
"""

__version__ = "1.0.0"
