"""Servizi per le spese: persistenza, ricorrenze, esportazione."""
