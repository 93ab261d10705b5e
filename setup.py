import os

from setuptools import setup

from gitflow_ci import const


def load_requirements(file):
    with open(file) as dependency_file:
        return list(filter(lambda line: len(line),
                           [line.split('#')[0].strip() for line in dependency_file.readlines()]
                           ))


def determine_module_names(base_dir):
    return [dirpath.replace(os.sep, '.') for dirpath, dirnames, filenames in os.walk(base_dir)
            if '__init__.py' in filenames]


setup(name='gitflow-ci',
      version=const.VERSION,
      description='Gitflow actions for build pipelines',
      license='MIT',
      python_requires=">=3.7",
      packages=determine_module_names('gitflow_ci'),
      package_data={'gitflow_ci': ['config.ini']},
      install_requires=load_requirements('requirements.txt'),
      extras_require={
          'test': load_requirements('test_requirements.txt'),
      },
      zip_safe=False,
      entry_points={
          'console_scripts': [
              'gitflow-ci=gitflow_ci.__main__:main',
          ],
      },
      )
