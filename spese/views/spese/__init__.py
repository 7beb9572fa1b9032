"""Blueprint per spese, ricorrenti e analisi."""
