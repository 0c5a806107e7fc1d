"""Detection and inversion of brightness mountains in 2-D images."""
