"""
Cache de resultados del motor hidráulico.

Memoriza tirante crítico, tirante normal y perfiles completos. La clave es
una serialización JSON ordenada de los parámetros relevantes redondeados
(4 decimales por defecto):

- Tirante crítico: forma, geometría, caudal y unidades
- Tirante normal: lo anterior más pendiente y rugosidad
- Perfil: todos los parámetros del canal y las opciones de cálculo

Las entradas expiran por tiempo de vida (10 minutos por defecto) y, al
superar el tamaño máximo, se descarta la insertada hace más tiempo. Los
valores devueltos son copias independientes.
"""

import copy
import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from pydantic import BaseModel

from hidrocanal.config import CacheConfig, ProfileOptions

logger = logging.getLogger(__name__)

CRITICAL_DEPTH = "critical_depth"
NORMAL_DEPTH = "normal_depth"
PROFILE = "profile"

CACHE_KINDS = (CRITICAL_DEPTH, NORMAL_DEPTH, PROFILE)

GEOMETRY_FIELDS = ("shape", "bottom_width", "side_slope", "diameter")
CRITICAL_FIELDS = GEOMETRY_FIELDS + ("discharge", "units")
NORMAL_FIELDS = CRITICAL_FIELDS + ("slope", "manning_n")


@dataclass(frozen=True)
class CacheStats:
    """Estado del cache."""
    entry_counts: dict[str, int] = field(default_factory=dict)
    ttl_s: float = 600.0
    max_size: int = 100
    enabled: bool = True
    hits: int = 0
    misses: int = 0

    @property
    def total_entries(self) -> int:
        return sum(self.entry_counts.values())


def _rounded(value: Any, precision: int) -> Any:
    if isinstance(value, float):
        return round(value, precision)
    if isinstance(value, dict):
        return {k: _rounded(v, precision) for k, v in value.items()}
    return value


def _copy(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    return copy.deepcopy(value)


class ResultCache:
    """
    Cache con tiempo de vida y tamaño máximo por tipo de resultado.

    Las operaciones de inserción y descarte están protegidas por un lock,
    por lo que una misma instancia puede compartirse entre hilos.

    Args:
        config: Configuración inicial
        clock: Función de tiempo en segundos (inyectable en tests)
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CacheConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._stores: dict[str, OrderedDict] = {kind: OrderedDict() for kind in CACHE_KINDS}
        self._hits = 0
        self._misses = 0

    # ------------------------------------------------------------------
    # Claves
    # ------------------------------------------------------------------

    def _key(self, data: dict) -> str:
        return json.dumps(_rounded(data, self.config.precision), sort_keys=True)

    def critical_key(self, channel) -> str:
        """Clave de tirante crítico."""
        data = channel.model_dump(mode="json")
        return self._key({name: data.get(name) for name in CRITICAL_FIELDS})

    def normal_key(self, channel) -> str:
        """Clave de tirante normal."""
        data = channel.model_dump(mode="json")
        return self._key({name: data.get(name) for name in NORMAL_FIELDS})

    def profile_key(self, channel, options: Optional[ProfileOptions] = None) -> str:
        """Clave de perfil completo."""
        options = options or ProfileOptions()
        return self._key({
            "channel": channel.model_dump(mode="json"),
            "options": options.model_dump(mode="json"),
        })

    # ------------------------------------------------------------------
    # Acceso
    # ------------------------------------------------------------------

    def get(self, kind: str, key: str) -> Any:
        """
        Obtiene una copia del valor almacenado.

        Returns:
            Copia del valor, o None si no existe, expiró o el cache está
            deshabilitado
        """
        if not self.config.enabled:
            return None
        with self._lock:
            store = self._stores[kind]
            entry = store.get(key)
            if entry is None:
                self._misses += 1
                return None
            timestamp, value = entry
            if self._clock() - timestamp > self.config.ttl_s:
                del store[key]
                self._misses += 1
                return None
            self._hits += 1
        return _copy(value)

    def put(self, kind: str, key: str, value: Any) -> None:
        """Almacena una copia del valor."""
        if not self.config.enabled:
            return
        with self._lock:
            store = self._stores[kind]
            store.pop(key, None)
            store[key] = (self._clock(), _copy(value))
            self._evict(store, kind)

    def _evict(self, store: OrderedDict, kind: str) -> None:
        while len(store) > self.config.max_size:
            store.popitem(last=False)
            logger.debug("Cache %s: entrada descartada por tamaño", kind)

    def get_critical(self, channel):
        return self.get(CRITICAL_DEPTH, self.critical_key(channel))

    def put_critical(self, channel, result) -> None:
        self.put(CRITICAL_DEPTH, self.critical_key(channel), result)

    def get_normal(self, channel):
        return self.get(NORMAL_DEPTH, self.normal_key(channel))

    def put_normal(self, channel, result) -> None:
        self.put(NORMAL_DEPTH, self.normal_key(channel), result)

    def get_profile(self, channel, options: Optional[ProfileOptions] = None):
        return self.get(PROFILE, self.profile_key(channel, options))

    def put_profile(self, channel, options: Optional[ProfileOptions], result) -> None:
        self.put(PROFILE, self.profile_key(channel, options), result)

    # ------------------------------------------------------------------
    # Gestión
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Elimina todas las entradas y reinicia contadores."""
        with self._lock:
            for store in self._stores.values():
                store.clear()
            self._hits = 0
            self._misses = 0
        logger.info("Cache vaciado")

    def purge_expired(self) -> int:
        """Elimina las entradas expiradas y devuelve cuántas se eliminaron."""
        removed = 0
        now = self._clock()
        with self._lock:
            for store in self._stores.values():
                expired = [k for k, (ts, _) in store.items() if now - ts > self.config.ttl_s]
                for key in expired:
                    del store[key]
                removed += len(expired)
        return removed

    def configure(self, **options) -> CacheConfig:
        """
        Actualiza la configuración.

        Args:
            **options: enabled, ttl_s, max_size, precision

        Returns:
            Nueva configuración

        Raises:
            pydantic.ValidationError: Si algún valor es inválido
        """
        config = CacheConfig(**{**self.config.model_dump(), **options})
        with self._lock:
            self.config = config
            for kind, store in self._stores.items():
                self._evict(store, kind)
            if not config.enabled:
                for store in self._stores.values():
                    store.clear()
        logger.info(
            "Cache configurado: ttl=%.0fs, max=%d, habilitado=%s",
            config.ttl_s, config.max_size, config.enabled,
        )
        return config

    def stats(self) -> CacheStats:
        """Cantidad de entradas por tipo y configuración vigente."""
        with self._lock:
            counts = {kind: len(store) for kind, store in self._stores.items()}
            return CacheStats(
                entry_counts=counts,
                ttl_s=self.config.ttl_s,
                max_size=self.config.max_size,
                enabled=self.config.enabled,
                hits=self._hits,
                misses=self._misses,
            )


# Cache compartido del proceso
_default_cache: Optional[ResultCache] = None


def get_cache() -> ResultCache:
    """Obtiene el cache compartido (se crea en el primer uso)."""
    global _default_cache
    if _default_cache is None:
        _default_cache = ResultCache()
    return _default_cache


def clear_cache() -> None:
    """Vacía el cache compartido."""
    get_cache().clear()


def configure_cache(**options) -> CacheConfig:
    """Configura el cache compartido."""
    return get_cache().configure(**options)


def cache_stats() -> CacheStats:
    """Estadísticas del cache compartido."""
    return get_cache().stats()
