"""
Module settings loaded from configobj files.

A module exposes its tunables as module-level variables. configure_module() loads the
configuration files named after the module and assigns any matching values to those variables.
Values are validated and converted by a schema file before they are applied.
"""
import logging
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section
from validate import Validator

logger = logging.getLogger(__name__)

# The default extension for configuration files
config_extension = '.cfg'

# Environment variable naming the directory holding user configuration files
user_config_dir_env = 'CONNHELPER_CONFIG_DIR'


def config_flavor(name, flavor=None):
    return name if not flavor else name + '.' + flavor


def config_filename(name, directory):
    """
    Determines the location of a config file in the given directory.
    """
    return os.path.join(directory, name + config_extension)


def user_config_dir():
    """
    The directory holding per-user configuration files.
    """
    return os.environ.get(user_config_dir_env) or os.path.expanduser(os.path.join('~', '.connhelper'))


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def config_flavor_file(name, directory, subpart=None) -> ConfigObj:
    """
    Loads a specialization of a config file. The file is named after the base, followed by a
    period and the specialization when one is given. Missing files produce an empty configuration.
    """
    file = config_filename(config_flavor(name, subpart), directory)
    return load_config_file_base(file, False)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def load_config(name, directory):
    """
    Loads all the configuration files that relate to the given name, in this order:
    - the default specialization
    - the platform specialization
    - the user configuration
    - the base configuration beside the module
    Later files override earlier ones. The merged result is validated against the
    schema specialization, which also supplies defaults and converts value types.
    :param name: the base name of the configuration files
    :param directory: the directory containing the packaged configuration files
    """
    config = ConfigObj()
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, os_name()))
    config.merge(config_flavor_file(name, user_config_dir()))
    config.merge(config_flavor_file(name, directory))

    config.configspec = config_flavor_file(name, directory, 'schema')
    result = config.validate(Validator())
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (name, result))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:    The root configuration
    :param path:    An iterable of the section names to descend through
    :return: The configuration section identified by the path, or None
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf(conf: Section, target):
    """
    Sets each attribute of the target that has a value in the configuration section.
    Nested sections and unknown names are ignored.
    """
    for k, v in conf.items():
        if hasattr(target, k) and not isinstance(v, Section):
            setattr(target, k, v)


def apply_conf_path(conf: Section, name_parts, target):
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)


def configure_module(module, config_name=None):
    """
    Applies the configuration to the given module.
    Settings for module a.b.c live in section [a] [[b]] [[[c]]] of the files named c.*.cfg
    found next to the module source.
    :param module: the module to configure
    :param config_name: the base name of the configuration files. Defaults to the module's short name.
    """
    fqname = module.__name__
    if not config_name:
        config_name = fqname.split('.')[-1]
    conf = load_config(config_name, os.path.dirname(module.__file__))
    apply_conf_path(conf, fqname.split('.'), module)
    logger.debug("configured module %s from %s" % (fqname, config_name))
