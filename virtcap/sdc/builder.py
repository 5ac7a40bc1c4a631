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

import logging

from virtcap import utils_classname
from virtcap.errors import InvalidIdentifier
from virtcap.sdc.bounds import get_bound_resolver
from virtcap.svpc_types import BOUND_KINDS

LOG = logging.getLogger("avocado." + __name__)


def build_capability_instance(instances, ref, res_type, bundle):
    """
    Wrap a bound bundle into a typed setting data instance.

    :param instances: InstanceFactory creating the instance
    :param ref: ObjectPath whose class prefix types the instance
    :param res_type: ResourceType of the bundle
    :param bundle: PropertyBundle returned by a bound resolver
    :return: Instance
    """
    base = utils_classname.rasd_classname_from_type(res_type)
    inst = instances.new_typed_instance(ref.classname, base, ref.namespace)
    inst.set_property("InstanceID", bundle.get("InstanceID"), "string")
    inst.set_property("ResourceType", int(res_type), "uint16")
    for prop in bundle:
        LOG.debug("Setting property '%s'", prop.field)
        inst.set_property(prop.field, prop.value, prop.type)
    return inst


def sdc_rasd_inst(instances, ref, res_type, kind, ctx):
    """
    Resolve one bound of a resource type into an instance

    :return: Instance, or None if the bound is not applicable
    """
    resolver = get_bound_resolver(res_type)
    if resolver is None:
        raise InvalidIdentifier("Unsupported device type %s" % res_type)
    bundle = resolver.resolve(kind, ref, ctx)
    if bundle is None:
        LOG.debug("%s of %s not applicable, skipped", kind.value,
                  res_type.name)
        return None
    return build_capability_instance(instances, ref, res_type, bundle)


def sdc_rasds_for_type(instances, ref, res_type, ctx):
    """
    Resolve all the bounds of a resource type.

    Either every applicable bound is returned or the first failure is
    raised.

    :return: list of Instance
    """
    if get_bound_resolver(res_type) is None:
        LOG.debug("Unsupported type %s", res_type)
        raise InvalidIdentifier("Unsupported device type")

    insts = []
    for kind in BOUND_KINDS:
        inst = sdc_rasd_inst(instances, ref, res_type, kind, ctx)
        if inst is not None:
            insts.append(inst)
    return insts
