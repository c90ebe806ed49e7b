"""
Cron - Conversion d'expressions cron en CronTrigger APScheduler.

Formats acceptes:
-----------------
- 5 champs: minute heure jour mois jour_semaine
- 6 champs: seconde minute heure jour mois jour_semaine

Jour de la semaine:
-------------------
En cron, 0 (et 7) = dimanche. APScheduler numerote a partir du lundi,
chaque element du champ (numero ou nom) est donc reecrit en noms
(sun, mon, ...).
"""

from apscheduler.triggers.cron import CronTrigger

DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def _day_number(token: str) -> int:
    """Numero cron (0-7) d'un jour donne en chiffre ou en nom."""
    name = token.lower()
    if name in DAY_NAMES:
        return DAY_NAMES.index(name)
    if not token.isdigit():
        raise ValueError(f"Jour de la semaine invalide: '{token}'")
    value = int(token)
    if value > 7:
        raise ValueError(f"Jour de la semaine hors bornes: {value}")
    return value


def _day_name(value: int) -> str:
    return DAY_NAMES[value % 7]


def _expand_day_part(part: str) -> list[str]:
    """Developpe un element de liste (valeur, plage, pas) en noms de jours."""
    base, _, step_text = part.partition("/")
    if step_text and not step_text.isdigit():
        raise ValueError(f"Pas invalide: '{part}'")
    step = int(step_text) if step_text else 1
    if step < 1:
        raise ValueError(f"Pas invalide: '{part}'")

    if base == "*":
        start, end = 0, 6
    elif "-" in base:
        start_text, end_text = base.split("-", 1)
        start, end = _day_number(start_text), _day_number(end_text)
    else:
        start = end = _day_number(base)
        # 5/2 = du vendredi jusqu'a 7 (dimanche)
        if step_text:
            end = 7

    if start > end:
        raise ValueError(f"Plage invalide: '{part}'")

    return [_day_name(value) for value in range(start, end + 1, step)]


def translate_day_of_week(field: str) -> str:
    """
    Reecrit le champ jour de la semaine d'une expression cron.

    Args:
        field: Champ cron (ex: "1-5", "0,6", "*/2", "mon-fri", "mon,3").

    Returns:
        Liste de noms de jours equivalente pour APScheduler.
    """
    if field in ("*", "?"):
        return "*"

    names: list[str] = []
    for part in field.split(","):
        if not part:
            raise ValueError(f"Champ jour de la semaine invalide: '{field}'")
        try:
            expanded = _expand_day_part(part)
        except ValueError as e:
            raise ValueError(f"Champ jour de la semaine invalide: '{field}' ({e})") from e
        for name in expanded:
            if name not in names:
                names.append(name)
    return ",".join(names)


def build_cron_trigger(expression: str, timezone: str) -> CronTrigger:
    """
    Construit un CronTrigger depuis une expression cron.

    Args:
        expression: Expression a 5 ou 6 champs.
        timezone: Fuseau IANA dans lequel evaluer l'expression.

    Returns:
        CronTrigger APScheduler.

    Raises:
        ValueError: Si l'expression est invalide.
    """
    fields = expression.split()
    if len(fields) == 5:
        fields = ["0", *fields]
    elif len(fields) != 6:
        raise ValueError(
            f"Expression cron invalide '{expression}': 5 ou 6 champs attendus, "
            f"{len(fields)} recus"
        )

    second, minute, hour, day, month, day_of_week = fields

    return CronTrigger(
        second=second,
        minute=minute,
        hour=hour,
        day="*" if day == "?" else day,
        month=month,
        day_of_week=translate_day_of_week(day_of_week),
        timezone=timezone,
    )
