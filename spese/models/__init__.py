# Import esplicito dei modelli per assicurare che siano registrati quando l'app importa
from spese.models.gruppo import Gruppo, UtenteGruppo  # noqa: F401
from spese.models.invito import Invito  # noqa: F401
from spese.models.spesa import Spesa  # noqa: F401
