"""Core storage components: codec, backends, stores and ordering."""
