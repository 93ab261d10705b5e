import io
import json
import os
from abc import abstractmethod, ABC
from configparser import ConfigParser

import yaml


class PropertyIO(ABC):
    """
    Reads and writes flat or nested dictionaries in the supported file formats.
    The format is determined by the file extension.
    """
    __reader_instances: dict = dict()

    @abstractmethod
    def from_stream(self, stream: io.TextIOBase) -> dict:
        pass

    @abstractmethod
    def to_stream(self, stream: io.TextIOBase, properties: dict):
        pass

    def from_file(self, property_file: str) -> dict:
        with open(property_file, mode='r', encoding='utf-8') as input_stream:
            return self.from_stream(input_stream)

    def to_file(self, property_file: str, properties: dict):
        with open(property_file, mode='w', encoding='utf-8') as output_stream:
            return self.to_stream(output_stream, properties)

    def from_str(self, string: str) -> dict:
        with io.StringIO(string) as input_stream:
            return self.from_stream(input_stream)

    @classmethod
    def read_file(cls, file_path: str) -> dict:
        return PropertyIO.get_instance_by_filename(file_path).from_file(file_path)

    @classmethod
    def write_file(cls, file_path: str, properties: dict):
        PropertyIO.get_instance_by_filename(file_path).to_file(file_path, properties)

    @classmethod
    def get_instance_by_filename(cls, file_name: str):
        name, extension = os.path.splitext(file_name)
        reader = cls.__reader_instances.get(extension, None)

        if reader is not None:
            return reader

        if extension in ['.yml', '.yaml']:
            reader = YAMLPropertyIO()
        elif extension == '.json':
            reader = JSONPropertyIO()
        elif extension == '.ini':
            reader = PythonConfigPropertyIO()
        else:
            raise RuntimeError('unsupported property file: ' + file_name)

        cls.__reader_instances[extension] = reader
        return reader


class YAMLPropertyIO(PropertyIO):
    def from_stream(self, stream: io.TextIOBase) -> dict:
        return yaml.safe_load(stream) or dict()

    def to_stream(self, stream: io.TextIOBase, properties: dict):
        yaml.safe_dump(properties, stream, default_flow_style=False, sort_keys=False)


class JSONPropertyIO(PropertyIO):
    def from_stream(self, stream: io.TextIOBase) -> dict:
        return json.load(stream)

    def to_stream(self, stream: io.TextIOBase, properties: dict):
        json.dump(properties, stream, indent=2)

    def from_str(self, string: str) -> dict:
        return super().from_str(string) if len(string) else dict()


class PythonConfigPropertyIO(PropertyIO):
    def from_stream(self, stream: io.TextIOBase) -> dict:
        config = ConfigParser()
        config.read_file(stream)
        return dict(config.items(section=config.default_section))

    def to_stream(self, stream: io.TextIOBase, properties: dict):
        config = ConfigParser()
        for key, value in properties.items():
            config.set(section=config.default_section, option=key, value=str(value))
        config.write(stream)
