"""Découpage d'une ligne de commande en arguments.

Le découpage reconnaît uniquement les guillemets doubles : un
argument est une suite de caractères sans espace pouvant contenir
des portions entre guillemets (les espaces y sont conservés). Les
guillemets sont ensuite supprimés.

Limites connues :
    - pas d'échappement par antislash ;
    - pas de guillemets simples ;
    - seul l'espace sépare les arguments (pas la tabulation) ;
    - un guillemet non fermé est ignoré au mieux, sans erreur ;
    - un argument ne contient qu'une portion entre guillemets :
      'a"b c"d"e f"' donne ['ab cd', 'e f'].

Example:
    >>> split_command_line('"arg one" two -z')
    ['arg one', 'two', '-z']
"""

import re
from typing import List, Optional

_TOKEN_PATTERN = re.compile(r'([^" ]*("[^"]*")[^" ]*)|[^" ]+')


def split_command_line(text: Optional[str]) -> List[str]:
    """Découpe une ligne de commande en arguments.

    Args:
        text: Ligne de commande, éventuellement vide ou None.

    Returns:
        Liste des arguments sans guillemets. Liste vide si text est
        vide ou None.
    """
    if not text:
        return []
    return [
        match.group(0).replace('"', "")
        for match in _TOKEN_PATTERN.finditer(text)
    ]
