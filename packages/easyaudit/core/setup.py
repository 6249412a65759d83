from setuptools import find_namespace_packages, setup

# Physical structure matches import path
packages = find_namespace_packages(where="../..", include=["easyaudit.core", "easyaudit.core.*"])

setup(
    packages=packages,
    package_dir={"": "../.."},
)
