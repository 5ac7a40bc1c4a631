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

"""
Settings that define the capabilities of a resource type
"""

from .bounds import BoundResolver, ResolverContext, get_bound_resolver
from .builder import (build_capability_instance, sdc_rasd_inst,
                      sdc_rasds_for_type)

__all__ = ["BoundResolver", "ResolverContext", "get_bound_resolver",
           "build_capability_instance", "sdc_rasd_inst", "sdc_rasds_for_type"]
