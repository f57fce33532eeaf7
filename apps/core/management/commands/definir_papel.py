# apps/core/management/commands/definir_papel.py

from django.core.management.base import BaseCommand

from apps.core.models import Usuario, Equipe, MembroEquipe


class Command(BaseCommand):
    help = 'Define o papel de um usuário em uma equipe (admin, product_owner, scrum_master, developer)'

    def add_arguments(self, parser):
        parser.add_argument('email', help='E-mail do usuário')
        parser.add_argument('papel', help='Novo papel do usuário na equipe')
        parser.add_argument(
            '--equipe',
            type=int,
            help='ID da equipe (padrão: primeira equipe do usuário)'
        )

    def handle(self, *args, **options):
        papeis = [papel for papel, _ in MembroEquipe.PAPEL_CHOICES]
        papel = options['papel']

        if papel not in papeis:
            self.stdout.write(self.style.ERROR(
                f'❌ Papel inválido: {papel}. Use um de: {", ".join(papeis)}'
            ))
            return

        usuario = Usuario.objects.filter(email__iexact=options['email']).first()
        if usuario is None:
            self.stdout.write(self.style.ERROR(f'❌ Usuário não encontrado: {options["email"]}'))
            return

        if options['equipe']:
            equipe = Equipe.objects.filter(id=options['equipe']).first()
            if equipe is None:
                self.stdout.write(self.style.ERROR(f'❌ Equipe não encontrada: {options["equipe"]}'))
                return
        else:
            equipe = usuario.equipes.order_by('id').first()
            if equipe is None:
                self.stdout.write(self.style.ERROR(f'❌ {usuario.email} não faz parte de nenhuma equipe'))
                return

        membro = MembroEquipe.objects.filter(usuario=usuario, equipe=equipe).first()
        if membro is None:
            self.stdout.write(self.style.ERROR(f'❌ {usuario.email} não é membro da equipe {equipe.nome}'))
            return

        membro.papel = papel
        membro.save(update_fields=['papel', 'atualizado_em'])

        self.stdout.write(self.style.SUCCESS(
            f'✅ {usuario.email} agora é {membro.get_papel_display()} na equipe {equipe.nome}'
        ))
