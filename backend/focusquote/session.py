"""
Estado em memória por usuário e o sincronismo com o banco.

``AppState`` só muda por três operações: ``apply_sync`` (fim de um sync),
``item_saved`` e ``item_deleted`` (patch local depois que o banco confirmou).
O ``SyncController`` garante no máximo um sync em andamento por instância:
chamadas concorrentes são descartadas, não enfileiradas.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import BaseModel

from focusquote import config, gateway
from focusquote.schemas import Client, Profile, Quote, ServiceTemplate, User

logger = logging.getLogger(__name__)

COLLECTIONS = ("clients", "services", "quotes")


class SyncResult(BaseModel):
    profile: Profile
    clients: List[Client]
    services: List[ServiceTemplate]
    quotes: List[Quote]
    needs_profile_setup: bool = False


class StateSnapshot(BaseModel):
    user: Optional[User] = None
    profile: Optional[Profile] = None
    clients: List[Client] = []
    services: List[ServiceTemplate] = []
    quotes: List[Quote] = []
    needs_profile_setup: bool = False
    initialized: bool = False
    skipped: bool = False


def default_profile_name(email: Optional[str]) -> str:
    if email and email.split("@")[0]:
        return email.split("@")[0]
    return "Usuário"


@dataclass
class AppState:
    user: Optional[User] = None
    profile: Optional[Profile] = None
    clients: List[Client] = field(default_factory=list)
    services: List[ServiceTemplate] = field(default_factory=list)
    quotes: List[Quote] = field(default_factory=list)
    needs_profile_setup: bool = False
    initialized: bool = False

    def apply_profile(self, profile: Profile, first_time: bool = False) -> None:
        self.profile = profile
        # só leva para o setup de perfil antes da primeira carga completa
        if first_time and not self.initialized:
            self.needs_profile_setup = True

    def apply_sync(self, result: SyncResult) -> None:
        self.apply_profile(result.profile, first_time=result.needs_profile_setup)
        self.clients = list(result.clients)
        self.services = list(result.services)
        self.quotes = list(result.quotes)
        self.initialized = True

    def item_saved(self, kind: str, record) -> None:
        if kind == "profile":
            self.profile = record
            self.needs_profile_setup = False
            return
        items = self._collection(kind)
        for idx, existing in enumerate(items):
            if existing.id == record.id:
                items[idx] = record
                return
        if kind == "quotes":
            items.insert(0, record)
        else:
            items.append(record)
            items.sort(key=lambda r: r.name)

    def item_deleted(self, kind: str, record_id: str) -> None:
        items = self._collection(kind)
        items[:] = [r for r in items if r.id != record_id]

    def _collection(self, kind: str) -> list:
        if kind not in COLLECTIONS:
            raise ValueError(f"unknown collection: {kind}")
        return getattr(self, kind)

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            user=self.user,
            profile=self.profile,
            clients=self.clients,
            services=self.services,
            quotes=self.quotes,
            needs_profile_setup=self.needs_profile_setup,
            initialized=self.initialized,
        )


class SyncController:
    def __init__(self, state: AppState):
        self.state = state
        self._in_flight = False

    @property
    def syncing(self) -> bool:
        return self._in_flight

    async def sync(self, user_id: str, email: Optional[str] = None) -> Optional[SyncResult]:
        if self._in_flight:
            logger.info("sync for %s already in flight, dropping", user_id)
            return None
        self._in_flight = True
        try:
            logger.info("sync start for %s", user_id)
            first_time = False
            profile = await gateway.fetch_profile(user_id)
            if profile is None:
                first_time = True
                profile = Profile(name=default_profile_name(email), email=email or "")
                await gateway.insert_profile(user_id, profile)
                logger.info("created default profile for %s", user_id)
            # perfil aplicado antes das coleções dependentes
            self.state.apply_profile(profile, first_time=first_time)

            clients, services, quotes = await asyncio.gather(
                gateway.list_clients(user_id),
                gateway.list_services(user_id),
                gateway.list_quotes(user_id),
            )
            result = SyncResult(
                profile=profile,
                clients=clients,
                services=services,
                quotes=quotes,
                needs_profile_setup=first_time,
            )
            self.state.apply_sync(result)
            logger.info("sync done for %s: %d clients, %d services, %d quotes",
                        user_id, len(clients), len(services), len(quotes))
            return result
        finally:
            self._in_flight = False


class SessionRegistry:
    """
    Um par (estado, controller) por usuário autenticado.

    Sessões sem acesso há mais de ``idle_seconds`` são descartadas no próximo
    ``get``; a próxima requisição desse usuário recomeça com estado vazio e
    recarrega via sync. Controllers com sync em andamento nunca são descartados.
    """

    def __init__(self, idle_seconds: Optional[float] = None, clock=time.monotonic):
        self.idle_seconds = config.SESSION_IDLE_SECONDS if idle_seconds is None else idle_seconds
        self._clock = clock
        self._sessions: Dict[str, SyncController] = {}
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, user: User) -> SyncController:
        now = self._clock()
        self.evict_idle(now)
        ctrl = self._sessions.get(user.id)
        if ctrl is None:
            ctrl = SyncController(AppState(user=user))
            self._sessions[user.id] = ctrl
        else:
            ctrl.state.user = user
        self._last_seen[user.id] = now
        return ctrl

    def state_for(self, user: User) -> AppState:
        return self.get(user).state

    def evict_idle(self, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        stale = [
            uid for uid, seen in self._last_seen.items()
            if now - seen > self.idle_seconds and not self._sessions[uid].syncing
        ]
        for uid in stale:
            self.drop(uid)
        if stale:
            logger.info("evicted %d idle sessions", len(stale))
        return len(stale)

    def drop(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)
        self._last_seen.pop(user_id, None)

    def clear(self) -> None:
        self._sessions.clear()
        self._last_seen.clear()


sessions = SessionRegistry()
