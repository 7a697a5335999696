"""
Configuration for the Conjure build orchestrator
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Paths
EXECUTABLE_CACHE_DIR = Path(
    os.getenv("CONJURE_EXECUTABLE_CACHE_DIR", str(Path.home() / ".cache" / "conjure-orchestrator"))
)
LOCAL_REPOSITORY_DIR = os.getenv("CONJURE_LOCAL_REPOSITORY")

# Artifact repository (maven layout) used to fetch executable distributions
REPOSITORY_URL = os.getenv("CONJURE_REPOSITORY_URL", "https://repo1.maven.org/maven2")
DOWNLOAD_TIMEOUT = int(os.getenv("CONJURE_DOWNLOAD_TIMEOUT", "60"))

# Naming conventions
GENERATOR_DEP_PREFIX = "conjure-"
TASK_GROUP = "Conjure"

# Aggregate operations (stable names)
TASK_COMPILE_CONJURE = "compileConjure"
TASK_COMPILE_IR = "compileIr"
TASK_RAW_IR = "rawIr"
TASK_CLEAN = "clean"
TASK_COPY_SOURCES = "copyConjureSourcesIntoBuild"
TASK_SERVICE_DEPENDENCIES = "generateConjureServiceDependencies"

# Source layout
SOURCE_DIR = os.getenv("CONJURE_SOURCE_DIR", "src/main/conjure")
SOURCE_EXTENSION = ".yml"
STAGING_DIRNAME = "conjure"
IR_DIRNAME = "conjure-ir"
RAW_IR_FILENAME = "rawIr.conjure.json"
SERVICE_DEPENDENCIES_FILENAME = "service-dependencies.json"
BUILD_DIRNAME = "build"

# Executable distributions (group:name[@ext])
CONJURE_COMPILER_BINARY = "com.palantir.conjure:conjure"
CONJURE_JAVA_BINARY = "com.palantir.conjure.java:conjure-java"
CONJURE_TYPESCRIPT_BINARY = "com.palantir.conjure.typescript:conjure-typescript@tgz"
CONJURE_PYTHON_BINARY = "com.palantir.conjure.python:conjure-python"

# Default versions for the first-class executables (override per project in the manifest)
DEFAULT_EXECUTABLE_VERSIONS = {
    CONJURE_COMPILER_BINARY: os.getenv("CONJURE_VERSION", "4.36.0"),
    CONJURE_JAVA_BINARY: os.getenv("CONJURE_JAVA_VERSION", "8.5.0"),
    CONJURE_TYPESCRIPT_BINARY: os.getenv("CONJURE_TYPESCRIPT_VERSION", "5.6.0"),
    CONJURE_PYTHON_BINARY: os.getenv("CONJURE_PYTHON_VERSION", "4.5.0"),
}

# Java project constants
JAVA_GENERATED_SOURCE_DIRNAME = "src/generated/java"
JAVA_GITIGNORE_CONTENTS = "/src/generated/java/\n"
CONJURE_JAVA_LIB_DEP = "com.palantir.conjure.java:conjure-lib"
ANNOTATION_API = "jakarta.annotation:jakarta.annotation-api:1.3.5"

# External tooling used by typescript/python post-processing
NPM_COMMAND = os.getenv("CONJURE_NPM_COMMAND", "npm.cmd" if os.name == "nt" else "npm")
PYTHON_COMMAND = os.getenv("CONJURE_PYTHON_COMMAND", "python")
COMMAND_TIMEOUT = int(os.getenv("CONJURE_COMMAND_TIMEOUT", "600"))

# Server Configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000").split(",")
    if origin.strip()
]
