"""Modelos y enums del dominio."""
