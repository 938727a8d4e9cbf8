import sys

from protoc_gen_openapi.openapi import generator

sys.exit(generator.cli())
