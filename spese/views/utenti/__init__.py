"""Blueprint per impostazioni, gruppo e inviti."""
