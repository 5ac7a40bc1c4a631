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


class CapabilityError(Exception):
    """Base exception for every failure raised by the resolvers."""

    status = "FAILED"

    def __init__(self, msg):
        Exception.__init__(self, msg)
        self.msg = msg

    def __str__(self):
        return self.msg


class ConnectionFailure(CapabilityError):

    status = "CONNECTION_FAILED"

    def __init__(self, target, reason=None):
        self.target = target
        self.reason = reason
        msg = "Could not connect to hypervisor '%s'" % target
        if reason:
            msg = "%s    (%s)" % (msg, reason)
        CapabilityError.__init__(self, msg)


class NotFound(CapabilityError):

    status = "NOT_FOUND"


class InvalidIdentifier(CapabilityError):

    status = "INVALID_IDENTIFIER"


class UnsupportedOperation(CapabilityError):

    status = "NOT_SUPPORTED"


class PropertyMissing(CapabilityError):

    status = "PROPERTY_MISSING"

    def __init__(self, prop, owner=None):
        self.prop = prop
        self.owner = owner
        if owner:
            msg = "Missing %s on `%s'" % (prop, owner)
        else:
            msg = "Missing %s" % prop
        CapabilityError.__init__(self, msg)
