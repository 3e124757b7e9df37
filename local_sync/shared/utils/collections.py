"""
Utilidades puras sobre colecciones.

Se mantienen libres de I/O para poder testearlas facilmente.
"""

from __future__ import annotations

from typing import Callable, Dict, Hashable, Iterable, List, Sequence, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """
    Divide una secuencia en sub-listas de tamaño `size`, preservando el orden.

    La ultima sub-lista puede ser mas corta. Una secuencia vacia produce `[]`.
    """
    if size < 1:
        raise ValueError(f"El tamaño de chunk debe ser >= 1 (recibido: {size})")

    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def build_lookup(elements: Iterable[T], key_getter: Callable[[T], str]) -> Dict[str, T]:
    """
    Construye un diccionario con un unico elemento por clave.

    La clave debe identificar de forma unica a cada elemento; si dos elementos
    comparten clave, gana el ultimo.
    """
    lookup: Dict[str, T] = {}
    for element in elements:
        lookup[key_getter(element)] = element
    return lookup


def build_multi_lookup(elements: Iterable[T], key_getter: Callable[[T], str]) -> Dict[str, List[T]]:
    """
    Construye un diccionario clave -> lista de elementos, en orden de aparicion.
    """
    lookup: Dict[str, List[T]] = {}
    for element in elements:
        lookup.setdefault(key_getter(element), []).append(element)
    return lookup


def find_duplicate_keys(elements: Iterable[T], key_getter: Callable[[T], str]) -> List[str]:
    """
    Retorna las claves que aparecen mas de una vez (en orden de primera repeticion).

    Se usa antes de `build_lookup` para no perder datos en silencio.
    """
    seen: set[str] = set()
    duplicates: List[str] = []
    for element in elements:
        key = key_getter(element)
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates


def unique_in_order(items: Iterable[K]) -> List[K]:
    """Elimina duplicados conservando la primera aparicion."""
    return list(dict.fromkeys(items))
