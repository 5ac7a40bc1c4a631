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
In-memory model of the objects exchanged with the management layer.

An :class:`Instance` is a typed bag of properties, an :class:`ObjectPath`
names one instance by its class, namespace and key properties and a
:class:`PropertyBundle` is the set of properties a bound resolver hands
to the capability instance builder.
"""

import logging
from copy import deepcopy

from virtcap import utils_classname
from virtcap.errors import PropertyMissing

LOG = logging.getLogger("avocado." + __name__)

# Properties identifying an instance
KEY_PROPERTIES = ("InstanceID",)


class Property(object):
    """
    One typed field of a bundle
    """

    def __init__(self, field, value, ptype=None):
        self.field = field
        self.value = value
        self.type = ptype

    def __eq__(self, other):
        if not isinstance(other, Property):
            return NotImplemented
        return (self.field == other.field and self.value == other.value and
                self.type == other.type)

    def __repr__(self):
        return "Property(%r, %r, %r)" % (self.field, self.value, self.type)


class PropertyBundle(object):
    """
    An ordered, private sequence of typed properties.

    The bundle deep copies the values it is built from and only hands out
    copies, so a bundle is never shared with, or changed by, its consumer.
    """

    def __init__(self, props=()):
        self._props = tuple(Property(field, deepcopy(value), ptype)
                            for field, value, ptype in props)

    def __iter__(self):
        for prop in self._props:
            yield Property(prop.field, deepcopy(prop.value), prop.type)

    def __len__(self):
        return len(self._props)

    def __contains__(self, field):
        return any(p.field == field for p in self._props)

    def __eq__(self, other):
        if not isinstance(other, PropertyBundle):
            return NotImplemented
        return self._props == other._props

    def __repr__(self):
        return "PropertyBundle(%r)" % (list(self._props),)

    def get(self, field, default=None):
        for prop in self._props:
            if prop.field == field:
                return deepcopy(prop.value)
        return default

    def fields(self):
        return [p.field for p in self._props]


class ObjectPath(object):

    def __init__(self, classname, namespace=None, keys=None):
        self.classname = classname
        self.namespace = namespace
        self.keys = dict(keys or {})

    @property
    def prefix(self):
        return utils_classname.class_prefix_name(self.classname)

    def get_key(self, name):
        return self.keys.get(name)

    def get_str_key(self, name):
        """
        Get a mandatory string key

        :raise PropertyMissing: if the key is absent or not a string
        """
        value = self.keys.get(name)
        if not isinstance(value, str):
            raise PropertyMissing(name, self.classname)
        return value

    def __eq__(self, other):
        if not isinstance(other, ObjectPath):
            return NotImplemented
        return (self.classname == other.classname and
                self.namespace == other.namespace and
                self.keys == other.keys)

    def __hash__(self):
        return hash((self.classname, self.namespace,
                     tuple(sorted(self.keys.items()))))

    def __str__(self):
        keys = ",".join('%s="%s"' % (k, v) for k, v in sorted(self.keys.items()))
        return "%s:%s.%s" % (self.namespace, self.classname, keys)

    __repr__ = __str__


class Instance(object):

    def __init__(self, classname, namespace=None, properties=None):
        self.classname = classname
        self.namespace = namespace
        self._properties = dict()
        self._types = dict()
        for name, value in (properties or {}).items():
            self.set_property(name, value)

    @property
    def properties(self):
        return dict(self._properties)

    def set_property(self, name, value, ptype=None):
        self._properties[name] = value
        if ptype:
            self._types[name] = ptype

    def get_property(self, name, default=None):
        return self._properties.get(name, default)

    def property_type(self, name):
        return self._types.get(name)

    def get_str_prop(self, name):
        value = self._properties.get(name)
        if not isinstance(value, str):
            raise PropertyMissing(name, self.classname)
        return value

    def get_u64_prop(self, name):
        value = self._properties.get(name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise PropertyMissing(name, self.classname)
        return value

    def __contains__(self, name):
        return name in self._properties

    def __getitem__(self, name):
        return self._properties[name]

    @property
    def path(self):
        keys = dict((k, self._properties[k]) for k in KEY_PROPERTIES
                    if k in self._properties)
        return ObjectPath(self.classname, self.namespace, keys)

    def __repr__(self):
        return "Instance(%s, %r)" % (self.classname, self._properties)


class InstanceFactory(object):
    """
    Create typed instances, i.e. instances of ``<Prefix>_<Base>``
    """

    def new_typed_instance(self, refcn, base, namespace):
        classname = utils_classname.get_typed_class(refcn, base)
        LOG.debug("Create instance of %s in %s", classname, namespace)
        return Instance(classname, namespace)
