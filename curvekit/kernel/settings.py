"""
Persistent settings stored in an ini file.

A Settings object is a dictionary of sections, each a dictionary of string values, mirrored to disk with
configparser. Typing happens when values are read back, see read_persistent() and GeometryParameters.
"""
import ast
import os
import platform
from configparser import ConfigParser, Error as ConfigParserError
from pathlib import Path
from typing import Any, Dict, Generator, Optional, Union

from .channel import channel

PersistentValue = Union[str, int, float, bool, list, tuple]


def get_safe_path(name: str, create: Optional[bool] = False, system: Optional[str] = None) -> str:
    """
    Per user directory for name where we may write, following the conventions of the OS.

    CURVEKIT_CONFIG_DIR, when set, replaces the OS dependent base directory.

    @param name: directory name
    @param create: create the directory if it does not exist yet
    @param system: platform.system() value to use instead of the actual one
    @return: directory path
    """
    base = os.environ.get("CURVEKIT_CONFIG_DIR")
    if not base:
        if not system:
            system = platform.system()
        if system == "Darwin":
            base = os.path.join(os.path.expanduser("~"), "Library", "Application Support")
        elif system == "Windows":
            base = os.path.expandvars("%LOCALAPPDATA%")
        else:
            base = os.path.join(os.path.expanduser("~"), ".config")
    directory = os.path.join(base, name)
    if create:
        os.makedirs(directory, exist_ok=True)
    return directory


class Settings:
    """
    Sections of string values backed by the file `filename` in the safe path `directory`.

    The file is read on creation and only written by write_configuration(). With ignore_settings there is no
    backing file: the object starts empty and read / write only act on an explicitly given targetfile.
    """

    def __init__(self, directory, filename, ignore_settings=False):
        self._config_dict = {}
        if ignore_settings:
            self._config_file = None
        else:
            self._config_file = Path(get_safe_path(directory, create=True)) / filename
            self.read_configuration()

    def __contains__(self, item):
        return item in self._config_dict

    @property
    def config_file(self):
        return self._config_file

    def _report(self, message):
        chan = channel("settings")
        if chan:
            chan(message)

    def read_configuration(self, targetfile=None):
        """
        Merge the values of targetfile (the backing file by default) into the current ones. A file that cannot be
        read or parsed changes nothing and is reported to the settings channel.
        """
        targetfile = targetfile or self._config_file
        if targetfile is None:
            return
        parser = ConfigParser()
        try:
            parser.read(targetfile, encoding="utf-8")
        except (OSError, ConfigParserError) as e:
            self._report(f"Could not read {targetfile}: {e}")
            return
        for section in parser.sections():
            values = self._config_dict.setdefault(section, {})
            for option in parser.options(section):
                values[option] = parser.get(section, option)

    def write_configuration(self, targetfile=None):
        targetfile = targetfile or self._config_file
        if targetfile is None:
            return
        parser = ConfigParser()
        for section, values in self._config_dict.items():
            parser.add_section(section)
            for key, value in values.items():
                # configparser interpolates %
                parser.set(section, key, value.replace("%", "%%"))
        try:
            with open(targetfile, "w", encoding="utf-8") as fp:
                parser.write(fp)
        except OSError as e:
            self._report(f"Could not write {targetfile}: {e}")

    def literal_dict(self):
        """All sections with every value that is a python literal evaluated."""
        result = {}
        for section, values in self._config_dict.items():
            result[section] = {key: self._literal(value) for key, value in values.items()}
        return result

    @staticmethod
    def _literal(value):
        try:
            return ast.literal_eval(value)
        except (ValueError, SyntaxError):
            return value

    def set_dict(self, literal_dict):
        """Replace all values by those of a dictionary of sections, as returned by literal_dict()."""
        self._config_dict = {
            section: {key: str(value) for key, value in values.items()}
            for section, values in literal_dict.items()
        }

    def read_persistent(self, t: type, section: str, key: str, default: PersistentValue = None) -> Any:
        """
        Value of section/key converted to type t, or default when it is missing or cannot be converted.

        Booleans are stored as "True" / "False", lists and tuples as their python literal.
        """
        try:
            value = self._config_dict[section][key]
        except KeyError:
            return default
        try:
            if t == bool:
                return value == "True"
            if t in (list, tuple):
                return t(ast.literal_eval(value))
            return t(value)
        except (ValueError, TypeError, SyntaxError):
            return default

    def read_persistent_string_dict(
        self, section: str, dictionary: Optional[Dict] = None, suffix: bool = False
    ) -> Dict:
        """
        Add the raw string values of a section to dictionary.

        @param section: section to read
        @param dictionary: dictionary to update, a new one if None
        @param suffix: use the bare keys instead of "section/key"
        @return: dictionary
        """
        if dictionary is None:
            dictionary = {}
        for key in self.keylist(section):
            name = key if suffix else f"{section}/{key}"
            dictionary[name] = self._config_dict[section][key]
        return dictionary

    def write_persistent(self, section: str, key: str, value: PersistentValue):
        """Store value as a string. Values of other types, None included, are ignored."""
        values = self._config_dict.setdefault(section, {})
        if isinstance(value, (str, int, float, bool, list, tuple)):
            values[str(key)] = str(value)

    def write_persistent_dict(self, section, write_dict):
        """Store every value of write_dict, except the ones with a key starting with an underscore."""
        for key, value in write_dict.items():
            if not key.startswith("_"):
                self.write_persistent(section, key, value)

    def clear_persistent(self, section: str):
        self._config_dict.pop(section, None)

    def delete_persistent(self, section: str, key: str):
        self._config_dict.get(section, {}).pop(key, None)

    def keylist(self, section: str) -> Generator[str, None, None]:
        """Keys of the section, nothing for a missing section."""
        yield from list(self._config_dict.get(section, ()))
