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

import configparser
import logging
import os.path

from virtcap import defaults

LOG = logging.getLogger('avocado.' + __name__)


class ConfigError(Exception):

    def __init__(self, msg):
        self.msg = msg

    def __str__(self):
        return self.msg


class ConfigNoOptionError(ConfigError):

    def __init__(self, option, path):
        self.option = option
        self.path = path

    def __str__(self):
        return "There's no option %s in config file %s." % (
            self.option, self.path)


class ConfigValueError(ConfigError):

    def __init__(self, section, option, value):
        self.section = section
        self.option = option
        self.value = value

    def __str__(self):
        return "Invalid value %r for option %s in section [%s]" % (
            self.value, self.option, self.section)


class EngineConfig(object):

    """
    Read-only settings of a capability engine.

    Every option falls back to :mod:`virtcap.defaults`, so an engine can be
    created without any configuration file at all.

    Example config file virtcap.conf:

    >[engine]
    >provider_prefix = KVM
    >namespace = root/virt
    >
    >[uri]
    >KVM = qemu:///system
    >
    >[policy]
    >kvm_max_nics = 8
    """

    _POLICY_KEYS = {
        "max_mem": defaults.MAX_MEM,
        "kvm_max_nics": defaults.KVM_MAX_NICS,
        "xen_max_nics": defaults.XEN_MAX_NICS,
        "xen_old_max_nics": defaults.XEN_OLD_MAX_NICS,
        "xen_nic_version_cutoff": defaults.XEN_NIC_VERSION_CUTOFF,
    }

    def __init__(self, path=None, provider_prefix=None, namespace=None,
                 uris=None, policy=None):
        self.path = path
        self._provider_prefix = provider_prefix
        self._namespace = namespace or defaults.NAMESPACE
        self._uris = dict(defaults.URIS)
        self._uris.update(uris or {})
        self._policy = dict(self._POLICY_KEYS)
        self._policy.update(policy or {})

    @classmethod
    def from_file(cls, path):
        """
        Load the settings from an INI file

        :param path: path of the configuration file
        :return: EngineConfig instance
        """
        if not os.path.isfile(path):
            raise ConfigError("Config file %s does not exist" % path)

        parser = configparser.ConfigParser(inline_comment_prefixes=(";",))
        # Keep the hypervisor prefixes case sensitive
        parser.optionxform = str
        parser.read(path)

        provider_prefix = None
        namespace = None
        if parser.has_section("engine"):
            provider_prefix = parser.get("engine", "provider_prefix",
                                         fallback="") or None
            namespace = parser.get("engine", "namespace", fallback=None)

        uris = {}
        if parser.has_section("uri"):
            uris = dict(parser.items("uri"))

        policy = {}
        if parser.has_section("policy"):
            for key, value in parser.items("policy"):
                if key not in cls._POLICY_KEYS:
                    raise ConfigNoOptionError(key, path)
                try:
                    policy[key] = int(value)
                except ValueError:
                    raise ConfigValueError("policy", key, value)

        LOG.debug("Loaded engine config from %s", path)
        return cls(path, provider_prefix, namespace, uris, policy)

    @property
    def provider_prefix(self):
        """
        The class-name prefix of the acting provider, None means any
        """
        return self._provider_prefix

    @property
    def namespace(self):
        return self._namespace

    def uri_for(self, prefix):
        """
        Get the connection URI of a hypervisor prefix
        """
        try:
            return self._uris[prefix]
        except KeyError:
            raise ConfigNoOptionError(prefix, self.path or "<defaults>")

    def policy(self, key):
        try:
            return self._policy[key]
        except KeyError:
            raise ConfigNoOptionError(key, self.path or "<defaults>")
