"""Esportazione delle spese di un periodo in un file xlsx"""
import io
import logging

import openpyxl

from spese.utils import FormatterUtils

logger = logging.getLogger(__name__)

INTESTAZIONI = ['DATA', 'TIPO', 'AMBITO', 'NEGOZIO', 'IMPORTO', 'NOTE', 'CONFERMATA', 'RICORRENTE']


def export_to_xlsx(spese, titolo='Spese'):
    """Scrive le spese in una cartella di lavoro e restituisce i byte del file.

    Le righe seguono l'ordine della lista ricevuta.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = titolo[:31]
    for i, h in enumerate(INTESTAZIONI, 1):
        ws.cell(row=1, column=i, value=h)

    for r_idx, s in enumerate(spese, 2):
        riga = (
            FormatterUtils.format_date(s.data_spesa),
            'Entrata' if s.tipo_transazione == 'entrata' else 'Uscita',
            s.ambito,
            s.negozio or '',
            round(float(s.importo), 2),
            s.note_spese or '',
            'Sì' if s.confermata else 'No',
            'Sì' if s.ricorrente else 'No',
        )
        for c_idx, val in enumerate(riga, 1):
            ws.cell(row=r_idx, column=c_idx, value=val)

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info('Esportate %d spese in xlsx (%s)', len(spese), titolo)
    return buffer.getvalue()
