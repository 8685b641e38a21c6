"""Application handlers – favourite commands.

All six handlers address the :class:`FavouriteAggregate` of one
``(entity_type, entity_id)`` target; identifiers are normalized before the
stream id is built, so ``abcdef`` and ``ABCDEF`` share a stream.
"""
from __future__ import annotations

import abc

from planecrazy.application.handlers.base import EventSourcedCommandHandler
from planecrazy.domain.aggregates import FavouriteAggregate
from planecrazy.domain.commands import (
    Command,
    FavouriteAircraft,
    FavouriteAircraftType,
    FavouriteAirport,
    UnfavouriteAircraft,
    UnfavouriteAircraftType,
    UnfavouriteAirport,
)
from planecrazy.domain.validation import EntityType, normalize_code


def _optional_code(value: str | None) -> str | None:
    return normalize_code(value) if value and value.strip() else None


def _optional_text(value: str | None) -> str | None:
    return value.strip() if value and value.strip() else None


class _FavouriteHandler(EventSourcedCommandHandler[Command, FavouriteAggregate]):
    entity_type: EntityType

    @abc.abstractmethod
    def _target_id(self, command: Command) -> str:
        """Raw identifier of the favourite target named by *command*."""

    def _create_aggregate(self, command: Command) -> FavouriteAggregate:
        return FavouriteAggregate(
            self.entity_type, normalize_code(self._target_id(command)), clock=self._clock
        )

    def _entity(self, aggregate: FavouriteAggregate, command: Command) -> tuple[str, str]:
        return aggregate.entity_type.value, aggregate.entity_id


class FavouriteAircraftHandler(_FavouriteHandler):
    entity_type = EntityType.AIRCRAFT

    def _target_id(self, command: FavouriteAircraft) -> str:
        return command.icao24

    def _execute(self, aggregate: FavouriteAggregate, command: FavouriteAircraft) -> None:
        aggregate.favourite_aircraft(
            registration=_optional_code(command.registration),
            type_code=_optional_code(command.type_code),
            user=command.acting_user,
        )


class UnfavouriteAircraftHandler(_FavouriteHandler):
    entity_type = EntityType.AIRCRAFT

    def _target_id(self, command: UnfavouriteAircraft) -> str:
        return command.icao24

    def _execute(self, aggregate: FavouriteAggregate, command: UnfavouriteAircraft) -> None:
        aggregate.unfavourite_aircraft(user=command.acting_user)


class FavouriteAircraftTypeHandler(_FavouriteHandler):
    entity_type = EntityType.TYPE

    def _target_id(self, command: FavouriteAircraftType) -> str:
        return command.type_code

    def _execute(self, aggregate: FavouriteAggregate, command: FavouriteAircraftType) -> None:
        aggregate.favourite_type(
            type_name=_optional_text(command.type_name), user=command.acting_user
        )


class UnfavouriteAircraftTypeHandler(_FavouriteHandler):
    entity_type = EntityType.TYPE

    def _target_id(self, command: UnfavouriteAircraftType) -> str:
        return command.type_code

    def _execute(self, aggregate: FavouriteAggregate, command: UnfavouriteAircraftType) -> None:
        aggregate.unfavourite_type(user=command.acting_user)


class FavouriteAirportHandler(_FavouriteHandler):
    entity_type = EntityType.AIRPORT

    def _target_id(self, command: FavouriteAirport) -> str:
        return command.icao_code

    def _execute(self, aggregate: FavouriteAggregate, command: FavouriteAirport) -> None:
        aggregate.favourite_airport(
            name=_optional_text(command.name),
            latitude=command.latitude,
            longitude=command.longitude,
            user=command.acting_user,
        )


class UnfavouriteAirportHandler(_FavouriteHandler):
    entity_type = EntityType.AIRPORT

    def _target_id(self, command: UnfavouriteAirport) -> str:
        return command.icao_code

    def _execute(self, aggregate: FavouriteAggregate, command: UnfavouriteAirport) -> None:
        aggregate.unfavourite_airport(user=command.acting_user)


__all__ = [
    "FavouriteAircraftHandler",
    "FavouriteAircraftTypeHandler",
    "FavouriteAirportHandler",
    "UnfavouriteAircraftHandler",
    "UnfavouriteAircraftTypeHandler",
    "UnfavouriteAirportHandler",
]
