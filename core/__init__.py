"""Pure building blocks for the OneExhib admin screens."""
