"""
Value Object pour une expression cron a 5 champs.

Format: minute heure jour-du-mois mois jour-de-la-semaine

Syntaxe supportee par champ:
    *         toutes les valeurs
    5         valeur unique
    1,15      liste
    8-17      intervalle
    */15      pas sur tout l'intervalle
    8-17/2    pas sur un intervalle
    5/10      pas a partir d'une valeur

Le jour de la semaine accepte 0-7 (0 et 7 = dimanche).
Quand jour-du-mois ET jour-de-la-semaine sont restreints, une date
correspond si l'un OU l'autre correspond (semantique cron classique).

Les macros (@daily, @weekly...) et les noms (MON, JAN) sont refuses:
l'expression doit etre explicite.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from pos_backoffice.domain.exceptions import InvalidCronExpressionError


# (nom, minimum, maximum)
_FIELDS = (
    ("minute", 0, 59),
    ("heure", 0, 23),
    ("jour-du-mois", 1, 31),
    ("mois", 1, 12),
    ("jour-de-la-semaine", 0, 7),
)

# Limite de recherche de la prochaine occurrence (29 fevrier + jour de semaine)
_SEARCH_HORIZON = timedelta(days=366 * 8)


def _parse_int(token: str, name: str, expression: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise InvalidCronExpressionError(expression, f"valeur non numerique '{token}' ({name})")
    return int(token)


def _parse_field(raw: str, name: str, low: int, high: int, expression: str) -> frozenset[int]:
    """Parse un champ cron en ensemble de valeurs autorisees."""
    values: set[int] = set()

    for item in raw.split(","):
        if not item:
            raise InvalidCronExpressionError(expression, f"element vide ({name})")

        step = 1
        if "/" in item:
            base, _, step_token = item.partition("/")
            step = _parse_int(step_token, name, expression)
            if step < 1:
                raise InvalidCronExpressionError(expression, f"pas nul ({name})")
        else:
            base = item

        if base == "*":
            start, end = low, high
        elif "-" in base:
            start_token, _, end_token = base.partition("-")
            start = _parse_int(start_token, name, expression)
            end = _parse_int(end_token, name, expression)
            if start > end:
                raise InvalidCronExpressionError(
                    expression, f"intervalle inverse {start}-{end} ({name})"
                )
        else:
            start = _parse_int(base, name, expression)
            end = high if "/" in item else start

        if start < low or end > high:
            raise InvalidCronExpressionError(
                expression, f"{name} doit etre entre {low} et {high}"
            )

        values.update(range(start, end + 1, step))

    return frozenset(values)


@dataclass(frozen=True)
class CronExpression:
    """
    Expression cron validee par construction.

    Attributes:
        expression: Expression normalisee (champs separes par un espace).

    Example:
        >>> cron = CronExpression("0 8 * * *")
        >>> cron.matches(datetime(2024, 3, 15, 8, 0))
        True
        >>> cron.matches(datetime(2024, 3, 15, 0, 0))
        False
    """

    expression: str
    minutes: frozenset[int] = field(init=False, repr=False, compare=False)
    hours: frozenset[int] = field(init=False, repr=False, compare=False)
    days_of_month: frozenset[int] = field(init=False, repr=False, compare=False)
    months: frozenset[int] = field(init=False, repr=False, compare=False)
    days_of_week: frozenset[int] = field(init=False, repr=False, compare=False)
    _dom_restricted: bool = field(init=False, repr=False, compare=False)
    _dow_restricted: bool = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Parse et valide l'expression."""
        if not isinstance(self.expression, str):
            raise InvalidCronExpressionError(self.expression, "doit etre une chaine")

        raw = self.expression.strip()
        if raw.startswith("@"):
            raise InvalidCronExpressionError(
                self.expression, "les macros ne sont pas supportees, utiliser 5 champs explicites"
            )

        parts = raw.split()
        if len(parts) != 5:
            raise InvalidCronExpressionError(
                self.expression, f"5 champs attendus, {len(parts)} recus"
            )

        parsed = [
            _parse_field(part, name, low, high, self.expression)
            for part, (name, low, high) in zip(parts, _FIELDS)
        ]

        # 7 = dimanche
        days_of_week = frozenset(0 if d == 7 else d for d in parsed[4])

        object.__setattr__(self, "expression", " ".join(parts))
        object.__setattr__(self, "minutes", parsed[0])
        object.__setattr__(self, "hours", parsed[1])
        object.__setattr__(self, "days_of_month", parsed[2])
        object.__setattr__(self, "months", parsed[3])
        object.__setattr__(self, "days_of_week", days_of_week)
        object.__setattr__(self, "_dom_restricted", not parts[2].startswith("*"))
        object.__setattr__(self, "_dow_restricted", not parts[4].startswith("*"))

    def __str__(self) -> str:
        return self.expression

    # ─────────────────────────────────────────────────────────────
    # Factories (presets proposes dans l'interface)
    # ─────────────────────────────────────────────────────────────

    @classmethod
    def daily(cls, hour: int = 0, minute: int = 0) -> "CronExpression":
        """Tous les jours a heure:minute."""
        return cls(f"{minute} {hour} * * *")

    @classmethod
    def weekly(cls, day_of_week: int, hour: int = 0, minute: int = 0) -> "CronExpression":
        """Chaque semaine le jour donne (0 = dimanche)."""
        return cls(f"{minute} {hour} * * {day_of_week}")

    @classmethod
    def monthly(cls, day: int, hour: int = 0, minute: int = 0) -> "CronExpression":
        """Chaque mois a la date donnee."""
        return cls(f"{minute} {hour} {day} * *")

    @classmethod
    def yearly(cls, month: int, day: int, hour: int = 0, minute: int = 0) -> "CronExpression":
        """Chaque annee a la date donnee."""
        return cls(f"{minute} {hour} {day} {month} *")

    @classmethod
    def is_valid(cls, expression: str) -> bool:
        """Retourne True si l'expression est parsable."""
        try:
            cls(expression)
        except InvalidCronExpressionError:
            return False
        return True

    # ─────────────────────────────────────────────────────────────
    # Evaluation
    # ─────────────────────────────────────────────────────────────

    def matches(self, moment: datetime) -> bool:
        """
        Verifie si la minute de `moment` correspond a l'expression.

        Les secondes sont ignorees.
        """
        return (
            moment.minute in self.minutes
            and moment.hour in self.hours
            and self._matches_date(moment)
        )

    def next_after(self, moment: datetime) -> Optional[datetime]:
        """
        Retourne la prochaine minute strictement apres `moment` qui correspond.

        Returns:
            Datetime (meme tzinfo que `moment`), None si aucune date
            n'existe (ex: 31 fevrier).
        """
        candidate = moment.replace(second=0, microsecond=0) + timedelta(minutes=1)
        limit = candidate + _SEARCH_HORIZON

        while candidate < limit:
            if not self._matches_date(candidate):
                candidate = (candidate + timedelta(days=1)).replace(hour=0, minute=0)
                continue
            if candidate.hour not in self.hours:
                candidate = (candidate + timedelta(hours=1)).replace(minute=0)
                continue
            if candidate.minute not in self.minutes:
                candidate += timedelta(minutes=1)
                continue
            return candidate

        return None

    def _matches_date(self, moment: datetime) -> bool:
        if moment.month not in self.months:
            return False

        # datetime.weekday(): lundi = 0 ; cron: dimanche = 0
        dow_match = (moment.weekday() + 1) % 7 in self.days_of_week
        dom_match = moment.day in self.days_of_month

        if self._dom_restricted and self._dow_restricted:
            return dom_match or dow_match
        return dom_match and dow_match
