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
Enumerations shared by the capability and association resolvers.

The numeric values are the ones the management information model uses on
the wire, so they must not be renumbered.
"""

from enum import Enum, IntEnum


class ResourceType(IntEnum):
    """
    The type of resource a pool, a setting or a capability describes
    """

    PROCESSOR = 3
    MEMORY = 4
    NETWORK = 10
    DISK = 17
    UNKNOWN = 1000


class BoundKind(Enum):
    """
    Which point of a resource's legal range a capability instance describes.

    The value is also the InstanceID of the capability instance.
    """

    MINIMUM = "Minimum"
    MAXIMUM = "Maximum"
    DEFAULT = "Default"
    INCREMENT = "Increment"


# Order in which the bounds of a resource type are produced
BOUND_KINDS = (
    BoundKind.MINIMUM,
    BoundKind.MAXIMUM,
    BoundKind.DEFAULT,
    BoundKind.INCREMENT,
)


class Backend(Enum):
    """
    The virtualization technology family, named by the class-name prefix
    """

    XEN = "Xen"
    KVM = "KVM"
    LXC = "LXC"

    @property
    def prefix(self):
        return self.value


class ValueRole(IntEnum):
    DEFAULT = 0
    OPTIMAL = 1
    MEAN = 2
    SUPPORTED = 3


class ValueRange(IntEnum):
    POINT = 0
    MINIMUMS = 1
    MAXIMUMS = 2
    INCREMENTS = 3


class PropertyPolicy(IntEnum):
    INDEPENDENT = 0
    CORRELATED = 1
