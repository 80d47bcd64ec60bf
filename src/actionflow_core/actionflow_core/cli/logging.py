# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import logging

LOGGER = logging.getLogger("actionflow")


def log(message: str, level: str = "info"):
    getattr(LOGGER, level.lower(), LOGGER.info)(message)
