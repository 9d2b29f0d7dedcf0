# DEPENDENCIES
from setuptools import setup
from setuptools import find_packages


# Read the long description from README.md if it exists

readme_path = "README.md"

try:
    with open(readme_path, "r", encoding="utf-8") as fh:
        long_description = fh.read()

except FileNotFoundError:
    long_description = "Clause-level risk analysis of long legal contracts"

setup(name                          = "contract-risk-analyzer",
      version                       = "1.0.0",
      description                   = "Clause-level risk analysis of long legal contracts with chunked LLM extraction.",
      long_description              = long_description,
      long_description_content_type = "text/markdown",
      packages                      = find_packages(exclude = ["tests", "tests.*"]), # Exclude test directories
      py_modules                    = ["app"],
      classifiers                   = ["Development Status :: 4 - Beta",
                                       "Intended Audience :: Legal Industry",
                                       "Operating System :: OS Independent",
                                       "Programming Language :: Python :: 3",
                                       "Programming Language :: Python :: 3.10",
                                       "Programming Language :: Python :: 3.11",
                                      ],
      python_requires               = ">=3.10",
      install_requires              = ["fastapi>=0.104.1",
                                       "uvicorn[standard]>=0.24.0",
                                       "pydantic>=2.5.0",
                                       "pydantic-settings>=2.1.0",
                                       "python-multipart>=0.0.6",
                                       "anthropic>=0.40.0",
                                       "PyPDF2>=3.0.0",
                                       "python-docx>=1.1.0",
                                      ],
      extras_require                = {"dev"  : ["black>=23.10.0", "isort>=5.12.0", "flake8>=6.0.0", "pytest>=7.4.0", "httpx>=0.25.0"],
                                       "test" : ["pytest>=7.4.0", "httpx>=0.25.0"],
                                      },
      entry_points                  = {"console_scripts": ["contract-risk-analyzer=app:main"]},
      include_package_data          = True,
     )
