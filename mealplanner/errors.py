# -*- coding: utf-8 -*-
"""Error taxonomy shared by the storage, registry, gateway and API layers."""

from __future__ import annotations


class MealPlannerError(Exception):
    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ConfigurationError(RuntimeError):
    """Fatal startup misconfiguration."""


class Unauthenticated(MealPlannerError):
    status_code = 401


class RegistryMissing(MealPlannerError):
    status_code = 409


class NoPartition(MealPlannerError):
    status_code = 409


class RegistryConflict(MealPlannerError):
    status_code = 503


class RegistryUnreadable(MealPlannerError):
    status_code = 500


class SaveFailed(MealPlannerError):
    status_code = 500


class DocumentUnavailable(MealPlannerError):
    status_code = 503


class AIGatewayFailure(MealPlannerError):
    status_code = 502


class BlobNotFound(MealPlannerError):
    status_code = 404


class PreconditionFailed(MealPlannerError):
    status_code = 409
