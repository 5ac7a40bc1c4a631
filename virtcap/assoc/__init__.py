# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.
#
# See LICENSE for more details.
#
# Copyright: Red Hat Inc. 2026

from . import resource_allocation_from_pool, settings_define_capabilities
from .base import AssocInfo, AssociationEdge

# Every association edge known to the engine
ALL_EDGES = (settings_define_capabilities.EDGES +
             resource_allocation_from_pool.EDGES)

__all__ = ["ALL_EDGES", "AssocInfo", "AssociationEdge"]
