from setuptools import setup, find_packages

setup(
    name="form_editor",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"form_editor.business_rules": ["element_templates.json"]},
    install_requires=[
        "pydantic>=2.5.0",
        "networkx>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
)
