from dataclasses import dataclass, field


@dataclass(frozen=True)
class DrugClass:
    """ A class of antiviral drugs that target one abstract gene. """
    name: str
    abstract_gene: str = field(compare=False)
    full_name: str = field(default='', compare=False)

    def __str__(self):
        return self.name
