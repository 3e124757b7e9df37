"""
Configuracion central y logging.
"""
