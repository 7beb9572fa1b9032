"""Servizi per utenti, gruppi e inviti."""
