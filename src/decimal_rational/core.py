"""
core.py — Domain Primitive per numeri razionali decimali esatti

================================================================================
DESIGN PRINCIPLES
================================================================================

1. RAPPRESENTAZIONE INTERNA
   Tre interi: significand / denominator × 10^exponent.
   Mai floating point internamente.

2. FORMA CANONICA
   Ogni percorso di costruzione passa da normalize().
   Due valori uguali hanno sempre gli stessi tre campi.

3. IMMUTABILITA
   Frozen dataclass. Ogni operazione restituisce nuova istanza.
   Nessun side effect, safe per concorrenza.

4. ESATTEZZA
   add/sub/mul/div non perdono mai precisione: l'allineamento degli
   esponenti moltiplica, non divide mai.
   Le uniche conversioni lossy sono from_number() (cifre inferite) e
   to_float(), e sono documentate come tali.

5. ERRORI ESPLICITI
   Denominatore zero e divisione per zero sollevano ZeroDivisionError.
   Nessun valore sentinella, nessun fallback approssimato.

================================================================================
INVARIANTI
================================================================================

Per ogni istanza viva:
1. denominator != 0
2. gcd(|significand|, |denominator|) == 1, oppure il valore è (0, 1, 0)
3. se significand != 0: né significand né denominator sono divisibili per 10
4. denominator > 0

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import math
import sys


logger = logging.getLogger(__name__)

# Oltre questa soglia le cifre inferite da un float sono quasi certamente
# artefatti della rappresentazione binaria (un double ha ~17 cifre significative).
INFERRED_DIGITS_WARNING: int = 17


# ==============================================================================
# ROUNDING STRATEGIES
# ==============================================================================

class RoundingMode(Enum):
    """
    Strategie di arrotondamento per from_number().

    - HALF_UP: pareggi lontano da zero (2.5 -> 3, -2.5 -> -3)
    - HALF_DOWN: pareggi verso zero (2.5 -> 2, -2.5 -> -2)
    - HALF_EVEN: banker's rounding, minimizza bias statistico
    - DOWN: sempre verso zero (truncation)
    - UP: sempre via da zero
    """
    HALF_UP = "half_up"
    HALF_DOWN = "half_down"
    HALF_EVEN = "half_even"  # Python default, IEEE 754 default
    DOWN = "down"
    UP = "up"


def _apply_rounding(value: float, mode: RoundingMode) -> int:
    """Applica la strategia di arrotondamento e restituisce intero."""

    def _half_up(v: float) -> int:
        return math.floor(v + 0.5) if v >= 0 else math.ceil(v - 0.5)

    def _half_down(v: float) -> int:
        return math.ceil(v - 0.5) if v >= 0 else math.floor(v + 0.5)

    def _half_even(v: float) -> int:
        return round(v)

    def _down(v: float) -> int:
        return math.floor(v) if v >= 0 else math.ceil(v)

    def _up(v: float) -> int:
        return math.ceil(v) if v >= 0 else math.floor(v)

    strategies = {
        RoundingMode.HALF_UP: _half_up,
        RoundingMode.HALF_DOWN: _half_down,
        RoundingMode.HALF_EVEN: _half_even,
        RoundingMode.DOWN: _down,
        RoundingMode.UP: _up,
    }

    strategy = strategies.get(mode)
    if strategy is None:
        raise ValueError(f"Unknown rounding mode: {mode}")

    # Oltre 2^52 v ± 0.5 non è rappresentabile: un intero resta com'è
    if value.is_integer():
        return int(value)

    return strategy(value)


# ==============================================================================
# NORMALIZZAZIONE
# ==============================================================================

def _gcd(a: int, b: int) -> int:
    """
    GCD binario su interi non negativi.

    Politica sui bordi (volutamente diversa da math.gcd):
        gcd(a, a) == a
        gcd(a, 0) == gcd(0, b) == 0
        gcd(1, b) == gcd(a, 1) == 1

    normalize() lo chiama solo con significand e denominator non nulli,
    quindi il ramo dello zero non viene mai raggiunto in pratica.

    Iterativo: i fattori 2 comuni sono accumulati in `shift` invece che
    nello stack, così operandi molto grandi non toccano il recursion limit.
    """
    shift = 0
    while True:
        if a == b:
            return a << shift
        if a == 0 or b == 0:
            return 0
        if a == 1 or b == 1:
            return 1 << shift
        if not (a & 1 or b & 1):
            a >>= 1
            b >>= 1
            shift += 1
        elif not a & 1:
            a >>= 1
        elif not b & 1:
            b >>= 1
        elif a > b:
            a = (a - b) >> 1
        else:
            a, b = (b - a) >> 1, a


def normalize(significand: int, denominator: int, exponent: int) -> DecimalRational:
    """
    Riduce una terna grezza alla sua unica forma canonica.

    Algoritmo:
    1. Zero -> (0, 1, 0): esponente e denominatore di uno zero non
       portano informazione.
    2. Divide numeratore e denominatore per il loro GCD.
    3. Sposta i fattori 10 del significand nell'esponente (exponent += 1).
    4. Sposta i fattori 10 del denominator nell'esponente (exponent -= 1).
    5. Porta il segno sul significand (denominator sempre > 0).

    Raises:
        ZeroDivisionError: se denominator == 0
    """
    if denominator == 0:
        raise ZeroDivisionError("Denominator cannot be zero.")

    if significand == 0:
        return DecimalRational(0, 1, 0)

    g = _gcd(abs(significand), abs(denominator))
    significand //= g
    denominator //= g

    while significand % 10 == 0:
        significand //= 10
        exponent += 1

    while denominator % 10 == 0:
        denominator //= 10
        exponent -= 1

    if denominator < 0:
        significand, denominator = -significand, -denominator

    return DecimalRational(significand, denominator, exponent)


def _require_int(name: str, value: object) -> None:
    # bool è sottoclasse di int ma non è un valore numerico accettabile qui
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(
            f"{name} deve essere int, ricevuto: {type(value).__name__}"
        )


def _infer_digits(number: float) -> tuple[int, int]:
    """
    Moltiplica per 10 finché il float non è intero.

    Termina sempre per float finiti: oltre 2^53 ogni double è intero.
    Restituisce (significand, exponent) non normalizzati.
    """
    significand = number
    exponent = 0
    while significand - int(significand) != 0.0:
        significand *= 10
        exponent -= 1

    if -exponent > INFERRED_DIGITS_WARNING:
        logger.debug(
            "from_number(%r) inferred %d decimal digits; "
            "result likely reflects binary float artifacts",
            number,
            -exponent,
        )

    return int(significand), exponent


# ==============================================================================
# DECIMAL RATIONAL
# ==============================================================================

@dataclass(frozen=True, slots=True, order=False)
class DecimalRational:
    """
    Domain Primitive per razionali decimali esatti.

    Valore semantico: significand / denominator × 10^exponent

    USAGE:
        price = DecimalRational.create(230, -2)      # 2.30
        qty = DecimalRational.create(120, -2)        # 1.20
        total = price.mul(qty)                       # 2.76, esatto
        third = DecimalRational.create(1, 0, 3)      # 1/3, esatto

    COSTRUZIONE:
        Usare create(), zero(), one() o from_number().
        Il costruttore diretto accetta solo terne già canoniche
        (verificato in __post_init__), quindi un'istanza fuori forma
        canonica non è osservabile.

    SERIALIZATION:
        to_dict() -> {"significand": int, "denominator": int, "exponent": int}
        from_dict() ricostruisce passando da create().
    """
    _significand: int
    _denominator: int = 1
    _exponent: int = 0

    def __post_init__(self) -> None:
        _require_int("significand", self._significand)
        _require_int("denominator", self._denominator)
        _require_int("exponent", self._exponent)

        if self._significand == 0:
            if self._denominator != 1 or self._exponent != 0:
                raise ValueError(
                    f"Zero non canonico: ({self._significand}, "
                    f"{self._denominator}, {self._exponent}). Usa create()."
                )
            return
        if self._denominator <= 0:
            raise ValueError(
                f"denominator deve essere > 0, ricevuto: {self._denominator}. "
                f"Usa create()."
            )
        if (
            self._significand % 10 == 0
            or self._denominator % 10 == 0
            or math.gcd(self._significand, self._denominator) != 1
        ):
            raise ValueError(
                f"Terna non in forma canonica: ({self._significand}, "
                f"{self._denominator}, {self._exponent}). Usa create()."
            )

    # -------------------------------------------------------------------------
    # Costruttori
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        significand: int,
        exponent: int = 0,
        denominator: int = 1,
    ) -> DecimalRational:
        """
        Costruttore generico: significand / denominator × 10^exponent.

        Nota l'ordine dei parametri: l'esponente viene prima del
        denominatore, perché i valori decimali finiti sono il caso comune.

        Raises:
            ZeroDivisionError: se denominator == 0
            TypeError: se un argomento non è int
        """
        _require_int("significand", significand)
        _require_int("exponent", exponent)
        _require_int("denominator", denominator)
        if denominator == 0:
            raise ZeroDivisionError("Denominator cannot be zero.")

        return normalize(significand, denominator, exponent)

    @classmethod
    def from_number(
        cls,
        number: int | float,
        digits: int = -1,
        rounding: RoundingMode = RoundingMode.HALF_UP,
    ) -> DecimalRational:
        """
        Costruttore da numero nativo.

        - int, o float intero: conversione esatta, digits e rounding ignorati.
        - digits >= 0: arrotonda number × 10^digits con la strategia
          scelta, una sola volta, qui. Se il prodotto esce dal range dei
          float, le cifre vengono inferite (esatto: nessun arrotondamento
          necessario).
        - digits < 0: inferisce l'esponente moltiplicando per 10 finché
          il float non è intero.

        ATTENZIONE: l'inferenza è best effort. Ricostruisce il decimale
        "più corto" solo se le cifre sopravvivono alle moltiplicazioni in
        doppia precisione; per float come 0.1 + 0.2 restituisce l'espansione
        binaria esatta, non 0.3. Per input umani, passare digits esplicito.

        Raises:
            TypeError: se number non è int/float o digits non è int
            ValueError: se number è NaN/inf, o se il valore richiede più
                di digits cifre e number × 10^digits non è rappresentabile
        """
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            raise TypeError(
                f"from_number accetta int o float, non {type(number).__name__}."
            )
        _require_int("digits", digits)

        if isinstance(number, int):
            return normalize(number, 1, 0)

        if not math.isfinite(number):
            raise ValueError(f"Impossibile rappresentare {number} come decimale.")

        # int() è esatto per ogni float intero, anche oltre 2^53
        if number.is_integer():
            return normalize(int(number), 1, 0)

        if digits >= 0:
            if digits <= sys.float_info.max_10_exp:
                scaled = number * 10 ** digits
                if math.isfinite(scaled):
                    return normalize(_apply_rounding(scaled, rounding), 1, -digits)

            significand, exponent = _infer_digits(number)
            if -exponent > digits:
                raise ValueError(
                    f"Impossibile arrotondare {number!r} a {digits} cifre: "
                    f"{number!r} × 10^{digits} esce dal range dei float."
                )
            return normalize(significand, 1, exponent)

        significand, exponent = _infer_digits(number)
        return normalize(significand, 1, exponent)

    @classmethod
    def zero(cls) -> DecimalRational:
        """Zero canonico (0, 1, 0). Utile come valore iniziale per sum()."""
        return cls(0, 1, 0)

    @classmethod
    def one(cls) -> DecimalRational:
        """Uno canonico (1, 1, 0)."""
        return cls(1, 1, 0)

    # -------------------------------------------------------------------------
    # Operazioni aritmetiche (esatte)
    # -------------------------------------------------------------------------

    def mul(self, other: DecimalRational) -> DecimalRational:
        return normalize(
            self._significand * other._significand,
            self._denominator * other._denominator,
            self._exponent + other._exponent,
        )

    def div(self, other: DecimalRational) -> DecimalRational:
        """
        Divisione esatta.

        Il significand del divisore diventa fattore del nuovo denominatore,
        quindi lo zero va rifiutato prima di normalizzare.

        Raises:
            ZeroDivisionError: se other è zero
        """
        if other._significand == 0:
            raise ZeroDivisionError("Division by zero.")

        return normalize(
            self._significand * other._denominator,
            self._denominator * other._significand,
            self._exponent - other._exponent,
        )

    def add(self, other: DecimalRational) -> DecimalRational:
        """
        Somma esatta.

        Gli esponenti vengono allineati scalando VERSO L'ALTO il significand
        dell'operando con esponente maggiore: si moltiplica per 10^diff,
        non si divide mai, quindi nessuna cifra va persa.
        """
        diff = other._exponent - self._exponent
        denominator = self._denominator * other._denominator

        if diff == 0:
            return normalize(
                self._significand * other._denominator
                + other._significand * self._denominator,
                denominator,
                self._exponent,
            )
        if diff > 0:
            return normalize(
                self._significand * other._denominator
                + other._significand * 10 ** diff * self._denominator,
                denominator,
                self._exponent,
            )
        return normalize(
            self._significand * 10 ** -diff * other._denominator
            + other._significand * self._denominator,
            denominator,
            other._exponent,
        )

    def negate(self) -> DecimalRational:
        # Gli invarianti non dipendono dal segno: nessuna normalizzazione.
        return DecimalRational(-self._significand, self._denominator, self._exponent)

    def sub(self, other: DecimalRational) -> DecimalRational:
        return self.add(other.negate())

    def equals(self, other: DecimalRational) -> bool:
        """Uguaglianza semantica: la differenza è lo zero canonico."""
        self._check_operand(other, "==")
        d = self.sub(other)
        return d._significand == 0 and d._denominator == 1

    def _check_operand(self, other: object, op: str) -> None:
        if not isinstance(other, DecimalRational):
            raise TypeError(
                f"Operazione non permessa: DecimalRational {op} {type(other).__name__}. "
                f"Usa DecimalRational.from_number() per convertire."
            )

    def __add__(self, other: DecimalRational) -> DecimalRational:
        self._check_operand(other, "+")
        return self.add(other)

    def __sub__(self, other: DecimalRational) -> DecimalRational:
        self._check_operand(other, "-")
        return self.sub(other)

    def __mul__(self, other: DecimalRational) -> DecimalRational:
        self._check_operand(other, "*")
        return self.mul(other)

    def __truediv__(self, other: DecimalRational) -> DecimalRational:
        self._check_operand(other, "/")
        return self.div(other)

    def __neg__(self) -> DecimalRational:
        return self.negate()

    def __abs__(self) -> DecimalRational:
        return self.negate() if self._significand < 0 else self

    # -------------------------------------------------------------------------
    # Comparazione
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DecimalRational):
            return self.equals(other)
        return NotImplemented

    def __hash__(self) -> int:
        # La forma canonica è unica: hash sui campi coerente con equals()
        return hash((self._significand, self._denominator, self._exponent))

    # -------------------------------------------------------------------------
    # Proprietà e output
    # -------------------------------------------------------------------------

    @property
    def significand(self) -> int:
        """Numeratore ridotto, porta il segno."""
        return self._significand

    @property
    def denominator(self) -> int:
        """Denominatore ridotto, sempre > 0."""
        return self._denominator

    @property
    def exponent(self) -> int:
        """Potenza di dieci applicata alla frazione."""
        return self._exponent

    def is_zero(self) -> bool:
        return self._significand == 0

    def to_float(self) -> float:
        """
        Conversione in float.

        ATTENZIONE: lossy, usare SOLO per display o confronti approssimati.
        Non usare per calcoli.
        """
        return self._significand / self._denominator * 10.0 ** self._exponent

    def __float__(self) -> float:
        return self.to_float()

    def __repr__(self) -> str:
        return (
            f"DecimalRational(significand={self._significand}, "
            f"denominator={self._denominator}, exponent={self._exponent})"
        )

    # -------------------------------------------------------------------------
    # Serializzazione
    # -------------------------------------------------------------------------

    FIELDS = ("significand", "denominator", "exponent")

    def to_dict(self) -> dict:
        """
        Serializza per persistenza/API.

        Formato: {"significand": int, "denominator": int, "exponent": int}
        L'ordine delle chiavi fa parte del contratto.

        NOTA: MAI serializzare come float.
        """
        return {
            "significand": self._significand,
            "denominator": self._denominator,
            "exponent": self._exponent,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DecimalRational:
        """
        Deserializza da dict passando da create().

        Una mappa non canonica viene normalizzata; un denominatore zero
        solleva ZeroDivisionError come in create().
        """
        unknown = set(data) - set(cls.FIELDS)
        if unknown:
            raise ValueError(f"Campi sconosciuti: {sorted(unknown)}")
        return cls.create(data["significand"], data["exponent"], data["denominator"])
