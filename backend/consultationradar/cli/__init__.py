"""Entrada por linea de comandos."""
