"""
ProcessRunner Port - Interface d'execution de commandes externes.

Responsabilite unique:
----------------------
Definir le contrat pour lancer une commande et capturer sa sortie.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ProcessOutput:
    """
    Resultat d'une commande terminee avec succes.

    Attributes:
        exit_code: Code retour (toujours 0 pour un succes).
        stdout: Sortie standard capturee (tronquee au plafond).
        stderr: Sortie d'erreur capturee (tronquee au plafond).
        truncated: True si au moins un flux a depasse le plafond.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    truncated: bool = False


class ProcessRunner(ABC):
    """
    Interface pour l'execution de commandes.

    Les implementations possibles:
    - SubprocessRunner: Pour production (subprocess)
    - Mock: Pour les tests
    """

    @abstractmethod
    def run(
        self,
        command: str,
        args: Sequence[str],
        max_output_bytes: int,
    ) -> ProcessOutput:
        """
        Execute une commande et attend sa fin.

        Args:
            command: Executable a lancer.
            args: Arguments (sans shell).
            max_output_bytes: Plafond de capture par flux.

        Returns:
            ProcessOutput si le code retour est 0.

        Raises:
            ExecError: Code retour non nul ou lancement impossible.
        """
        pass
